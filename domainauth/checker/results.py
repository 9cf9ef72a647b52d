"""Shared builders for failed RecordCheckResult values."""

from __future__ import annotations

from domainauth.checker.resolver import describe_dns_error
from domainauth.checker.suggestions import SuggestionContext, suggest
from domainauth.models import (
    DnsErrorKind,
    ErrorKind,
    RecordCheckResult,
    RecordKind,
    TxtLookup,
)

INVALID_DOMAIN_MESSAGE = "Invalid domain format."

_LOOKUP_ERROR_KINDS: dict[DnsErrorKind, ErrorKind] = {
    DnsErrorKind.NOT_FOUND: ErrorKind.RECORD_ABSENT,
    DnsErrorKind.TIMEOUT: ErrorKind.DNS_TIMEOUT,
    DnsErrorKind.RESOLUTION_FAILURE: ErrorKind.DNS_RESOLUTION_FAILURE,
}


def invalid_domain_result() -> RecordCheckResult:
    """Result used for both records when the domain name is unusable."""
    return RecordCheckResult(
        present=False,
        valid=False,
        lookup_hostname="",
        error=INVALID_DOMAIN_MESSAGE,
        error_kind=ErrorKind.INVALID_DOMAIN_FORMAT,
    )


def lookup_failure_result(
    kind: RecordKind,
    lookup: TxtLookup,
    context: SuggestionContext,
) -> RecordCheckResult:
    """Turn a failed TXT lookup into a not-present result with a suggestion."""
    label = kind.name
    host = context.lookup_hostname
    reason = _LOOKUP_ERROR_KINDS[lookup.error or DnsErrorKind.RESOLUTION_FAILURE]

    if reason is ErrorKind.RECORD_ABSENT:
        detail = describe_dns_error(lookup.error_code)
        error = f"No {label} record found at {host}."
        if detail:
            error = f"{error} {detail}"
    elif reason is ErrorKind.DNS_TIMEOUT:
        error = f"DNS lookup for {host} timed out; the {label} record could not be checked."
    else:
        error = f"DNS lookup for {host} failed: {lookup.error_message or 'unknown error'}"

    return RecordCheckResult(
        present=False,
        valid=False,
        lookup_hostname=host,
        error=error,
        error_kind=reason,
        dns_error_code=lookup.error_code,
        suggestion=suggest(kind, reason, context),
    )


def check_failed_result(
    kind: RecordKind,
    context: SuggestionContext,
    exc: BaseException,
) -> RecordCheckResult:
    """Result for a check that raised instead of returning."""
    return RecordCheckResult(
        present=False,
        valid=False,
        lookup_hostname=context.lookup_hostname,
        error=f"{kind.name} check failed: {exc}",
        error_kind=ErrorKind.CHECK_FAILED,
        suggestion=suggest(kind, ErrorKind.CHECK_FAILED, context),
    )
