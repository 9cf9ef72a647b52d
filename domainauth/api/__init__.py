"""API blueprint - JSON endpoints for domain authentication checks."""

from __future__ import annotations

from flask import Blueprint

bp: Blueprint = Blueprint("api", __name__, url_prefix="/api/v1")

from domainauth.api import routes  # noqa: E402, F401
