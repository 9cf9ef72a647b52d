"""
DMARC record validation.

Validates the DMARC (Domain-based Message Authentication, Reporting and
Conformance) record for a domain:
- Queries the _dmarc.{domain} TXT record
- Selects the first TXT value whose leading tag is v=DMARC1
- Parses all tag=value pairs (p, sp, rua, ruf, pct, aspf, adkim, fo)
- Rejects a missing or unknown p= policy and an out-of-range pct=
- Reports advisory warnings for weak but legal settings
"""

from __future__ import annotations

import logging
import re

from domainauth.checker.parser import ParseResult, parse_tags
from domainauth.checker.resolver import TxtSource
from domainauth.checker.results import lookup_failure_result
from domainauth.checker.suggestions import SuggestionContext, suggest
from domainauth.models import ErrorKind, RecordCheckResult, RecordKind

logger = logging.getLogger(__name__)

DMARC_VERSION = "DMARC1"
POLICIES = ("none", "quarantine", "reject")
ALIGNMENT_MODES = ("r", "s")


def dmarc_hostname(domain: str) -> str:
    return f"_dmarc.{domain}"


def check_dmarc(domain: str, resolver: TxtSource) -> RecordCheckResult:
    """Validate the DMARC record for *domain*.

    Args:
        domain: A domain name that already passed format validation.
        resolver: Object providing ``resolve_txt(hostname)``.

    Returns:
        A RecordCheckResult.  Absence, DNS failures and policy errors are
        all reported in the result; nothing is raised.
    """
    host = dmarc_hostname(domain)
    context = SuggestionContext(domain=domain, lookup_hostname=host)

    lookup = resolver.resolve_txt(host)
    if not lookup.ok:
        return lookup_failure_result(RecordKind.DMARC, lookup, context)

    # A name can carry unrelated TXT records next to the policy
    candidates: list[tuple[str, ParseResult]] = []
    for record in lookup.records:
        parsed = parse_tags(record, version=DMARC_VERSION)
        if parsed.ok:
            candidates.append((record, parsed))

    if not candidates:
        return _invalid(
            context,
            record=lookup.records[0],
            parsed=None,
            error=f"No TXT record at {host} starts with v={DMARC_VERSION}.",
        )

    warnings: list[str] = []
    if len(candidates) > 1:
        warnings.append(
            f"Multiple DMARC records found ({len(candidates)}); only one is allowed "
            "and receivers may ignore all of them"
        )

    record, parsed = candidates[0]
    tags = parsed.tags

    error = _validate_tags(tags)
    if error:
        return _invalid(context, record=record, parsed=tags, error=error, warnings=warnings)

    warnings.extend(_policy_warnings(tags))
    logger.debug("DMARC record for %s is valid: p=%s", domain, tags["p"])
    return RecordCheckResult(
        present=True,
        valid=True,
        lookup_hostname=host,
        record=record,
        parsed=tags,
        warnings=tuple(warnings),
    )


def _validate_tags(tags: dict[str, str]) -> str | None:
    """Return an error message naming the offending tag, or None."""
    p_value = tags.get("p")
    if p_value is None:
        return "DMARC policy tag p= is missing; it is required (none, quarantine or reject)."
    if p_value.lower() not in POLICIES:
        return f"Invalid DMARC policy tag p={p_value}; expected none, quarantine or reject."

    pct = tags.get("pct")
    if pct is not None and parse_pct(pct) is None:
        return f"Invalid DMARC pct tag pct={pct}; expected an integer from 0 to 100."
    return None


def parse_pct(pct_str: str | None) -> int | None:
    """Parse the pct= tag value as an integer, returning None if invalid."""
    if pct_str is None or not (pct_str.isascii() and pct_str.isdigit()):
        return None
    value = int(pct_str)
    if 0 <= value <= 100:
        return value
    return None


def extract_uris(value: str) -> list[str]:
    """Extract URIs from a DMARC rua/ruf tag value.

    Values are comma-separated URIs, potentially with size limits
    (e.g., mailto:user@example.com!10m).
    """
    uris: list[str] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        match = re.match(r"(mailto:[^\s!]+)", item, re.IGNORECASE)
        uris.append(match.group(1) if match else item)
    return uris


def _policy_warnings(tags: dict[str, str]) -> list[str]:
    """Advisory findings for a record that is otherwise valid."""
    warnings: list[str] = []

    if tags["p"].lower() == "none":
        warnings.append(
            "DMARC policy is p=none (monitoring only); consider p=quarantine or p=reject"
        )

    sp_value = tags.get("sp")
    if sp_value is not None:
        if sp_value.lower() not in POLICIES:
            warnings.append(f"Unknown subdomain policy sp={sp_value}; receivers will use p=")
        elif sp_value.lower() == "none":
            warnings.append("Subdomain policy is sp=none; subdomains are not protected")

    for tag in ("adkim", "aspf"):
        mode = tags.get(tag)
        if mode is not None and mode.lower() not in ALIGNMENT_MODES:
            warnings.append(f"Unknown alignment mode {tag}={mode}; expected r or s")

    rua_list = extract_uris(tags.get("rua", ""))
    ruf_list = extract_uris(tags.get("ruf", ""))
    if not rua_list:
        warnings.append("No rua= aggregate report URI specified; you will not receive DMARC reports")
    if ruf_list and not rua_list:
        warnings.append("ruf= (forensic reports) is set but rua= (aggregate reports) is missing")

    pct_value = parse_pct(tags.get("pct"))
    if pct_value is not None and pct_value < 100:
        warnings.append(
            f"pct={pct_value} means only {pct_value}% of messages are subject to the DMARC policy"
        )

    return warnings


def _invalid(
    context: SuggestionContext,
    record: str,
    parsed: dict[str, str] | None,
    error: str,
    warnings: list[str] | None = None,
) -> RecordCheckResult:
    logger.info("DMARC record at %s is invalid: %s", context.lookup_hostname, error)
    return RecordCheckResult(
        present=True,
        valid=False,
        lookup_hostname=context.lookup_hostname,
        record=record,
        parsed=parsed,
        error=error,
        error_kind=ErrorKind.RECORD_MALFORMED,
        suggestion=suggest(RecordKind.DMARC, ErrorKind.RECORD_MALFORMED, context),
        warnings=tuple(warnings or ()),
    )
