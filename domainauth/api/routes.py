"""
API blueprint routes.

Provides JSON endpoints for running a DMARC/DKIM check on a domain and
for application health.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import current_app, jsonify, request

from domainauth import RESOLVER_EXTENSION
from domainauth.api import bp
from domainauth.checker.engine import DomainAuthChecker

logger = logging.getLogger(__name__)


@bp.route("/health")
def health():
    """Public health-check endpoint."""
    return jsonify(
        {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "DMARC/DKIM Domain Auth Checker",
        }
    )


@bp.route("/domain-auth")
def domain_auth():
    """Run DMARC and DKIM checks for ``?domain=<d>&selector=<s>``.

    ``dkimSelector`` is accepted as an alias for ``selector``.  When
    neither is given, DEFAULT_DKIM_SELECTOR is used.

    Returns 400 when ``domain`` is missing.  A malformed domain is not an
    HTTP error: the report itself says "Invalid domain format.".
    """
    domain = request.args.get("domain", "").strip()
    if not domain:
        return jsonify({"error": 'Query parameter "domain" is required (e.g. example.com).'}), 400

    selector = request.args.get("selector")
    if selector is None:
        selector = request.args.get("dkimSelector")
    if selector is None:
        selector = current_app.config.get("DEFAULT_DKIM_SELECTOR", "mail")

    checker = DomainAuthChecker(current_app.extensions[RESOLVER_EXTENSION])
    try:
        report = checker.check(domain, selector)
    except Exception:
        logger.exception("Domain auth check failed for %s", domain)
        return jsonify({"error": "Domain auth check failed"}), 500

    return jsonify(report.to_dict())
