"""
DKIM key record validation.

Validates the DKIM (DomainKeys Identified Mail) key published for one
selector of a domain:
- Queries the {selector}._domainkey.{domain} TXT record
- Parses DKIM record tags (v=, k=, h=, t=, p=)
- Validates key presence and detects revoked keys (empty p=)
- Measures the public key size using the cryptography library
"""

from __future__ import annotations

import base64
import binascii
import logging
import re

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.serialization import load_der_public_key

from domainauth.checker.parser import parse_tags
from domainauth.checker.resolver import TxtSource
from domainauth.checker.results import lookup_failure_result
from domainauth.checker.suggestions import SuggestionContext, suggest
from domainauth.checker.validation import is_valid_selector
from domainauth.models import ErrorKind, RecordCheckResult, RecordKind

logger = logging.getLogger(__name__)

DKIM_VERSION = "DKIM1"
KEY_TYPES = ("rsa", "ed25519")
INVALID_SELECTOR_MESSAGE = "Invalid DKIM selector format."

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")
_WHITESPACE_RE = re.compile(r"\s+")


def dkim_hostname(domain: str, selector: str) -> str:
    return f"{selector}._domainkey.{domain}"


def check_dkim(domain: str, selector: str, resolver: TxtSource) -> RecordCheckResult:
    """Validate the DKIM key record for *selector* on *domain*.

    Args:
        domain: A domain name that already passed format validation.
        selector: The DKIM selector label (e.g. "google", "selector1").
        resolver: Object providing ``resolve_txt(hostname)``.

    Returns:
        A RecordCheckResult.  An unusable selector is reported without
        issuing a DNS query.
    """
    host = dkim_hostname(domain, selector)
    context = SuggestionContext(domain=domain, lookup_hostname=host, selector=selector)

    if not is_valid_selector(selector):
        logger.info("Rejected DKIM selector %r for %s", selector, domain)
        return RecordCheckResult(
            present=False,
            valid=False,
            lookup_hostname=host,
            error=INVALID_SELECTOR_MESSAGE,
            error_kind=ErrorKind.INVALID_SELECTOR_FORMAT,
            suggestion=suggest(RecordKind.DKIM, ErrorKind.INVALID_SELECTOR_FORMAT, context),
        )

    lookup = resolver.resolve_txt(host)
    if not lookup.ok:
        return lookup_failure_result(RecordKind.DKIM, lookup, context)

    record = _select_record(lookup.records)
    parsed = parse_tags(record)
    if not parsed.ok:
        return _invalid(
            context,
            record,
            None,
            f"DKIM record at {host} is malformed: {parsed.message}",
        )

    tags = parsed.tags
    warnings: list[str] = []

    v_tag = tags.get("v")
    if v_tag is not None:
        if v_tag.upper() != DKIM_VERSION:
            return _invalid(
                context,
                record,
                tags,
                f"Unexpected DKIM version v={v_tag} at {host}; expected v=DKIM1.",
            )
        if parsed.first_tag != "v":
            warnings.append("v=DKIM1 should be the first tag of the record")

    # Key type (defaults to rsa)
    key_type = tags.get("k", "rsa").lower()
    if key_type not in KEY_TYPES:
        warnings.append(f"Unknown DKIM key type k={key_type}")

    # Check for testing mode
    t_tag = tags.get("t", "")
    if "y" in [flag.strip().lower() for flag in t_tag.split(":")]:
        warnings.append("DKIM key is in testing mode (t=y)")

    if "p" not in tags:
        return _invalid(
            context, record, tags, f"DKIM record at {host} is missing the required p= tag."
        )

    p_tag = _WHITESPACE_RE.sub("", tags["p"])
    if p_tag == "":
        # Empty p= means key is revoked
        return _invalid(
            context,
            record,
            tags,
            f"DKIM key revoked: the p= tag at {host} is empty.",
            kind=ErrorKind.RECORD_REVOKED,
            warnings=warnings,
        )

    der_bytes = _decode_key(p_tag)
    if der_bytes is None:
        return _invalid(
            context,
            record,
            tags,
            f"DKIM p= tag at {host} is not a valid base64 public key.",
            warnings=warnings,
        )

    key_size = measure_key_size(der_bytes, key_type)
    if key_size is None:
        warnings.append("Could not determine DKIM key size")
    elif key_type == "rsa" and key_size < 1024:
        warnings.append(
            f"DKIM key size is {key_size} bits; minimum 1024 required, 2048+ recommended"
        )
    elif key_type == "rsa" and key_size < 2048:
        warnings.append(f"DKIM key size is {key_size} bits; consider upgrading to 2048+ bits")

    logger.debug("DKIM record for %s is valid (key_size=%s)", host, key_size)
    return RecordCheckResult(
        present=True,
        valid=True,
        lookup_hostname=host,
        record=record,
        parsed=tags,
        warnings=tuple(warnings),
        key_size=key_size,
    )


def _select_record(records: list[str]) -> str:
    """Pick the TXT value that looks like a DKIM key, else the first one."""
    for record in records:
        tags = parse_tags(record).tags
        if tags.get("v", "").upper() == DKIM_VERSION or "p" in tags:
            return record
    return records[0]


def _decode_key(p_value: str) -> bytes | None:
    if not _BASE64_RE.match(p_value):
        return None
    try:
        return base64.b64decode(p_value, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.debug("Failed to decode DKIM p= base64: %s", exc)
        return None


def measure_key_size(der_bytes: bytes, key_type: str) -> int | None:
    """Return the public key size in bits, or None if it cannot be loaded.

    Args:
        der_bytes: The decoded p= value (SubjectPublicKeyInfo DER).
        key_type: The key algorithm (rsa, ed25519).
    """
    if key_type == "ed25519":
        # Ed25519 keys are always 256 bits
        return 256

    try:
        public_key = load_der_public_key(der_bytes)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        logger.debug("Failed to load DER public key: %s", exc)
        return None
    return getattr(public_key, "key_size", None)


def _invalid(
    context: SuggestionContext,
    record: str,
    parsed: dict[str, str] | None,
    error: str,
    kind: ErrorKind = ErrorKind.RECORD_MALFORMED,
    warnings: list[str] | None = None,
) -> RecordCheckResult:
    logger.info("DKIM record at %s is invalid: %s", context.lookup_hostname, error)
    return RecordCheckResult(
        present=True,
        valid=False,
        lookup_hostname=context.lookup_hostname,
        record=record,
        parsed=parsed,
        error=error,
        error_kind=kind,
        suggestion=suggest(RecordKind.DKIM, kind, context),
        warnings=tuple(warnings or ()),
    )
