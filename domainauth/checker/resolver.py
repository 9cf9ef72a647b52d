"""
DNS TXT resolver wrapper.

Provides thread-safe TXT resolution with configurable nameservers and a
bounded per-query deadline, folding every dnspython failure into the
closed ``DnsErrorKind`` set so callers never see resolver exceptions.
"""

from __future__ import annotations

import logging
from typing import Protocol

import dns.exception
import dns.resolver

from domainauth.models import DnsErrorKind, DnsSettings, TxtLookup

logger = logging.getLogger(__name__)

_DNS_ERROR_DESCRIPTIONS: dict[str, str] = {
    "NXDOMAIN": "DNS name does not exist (hostname not found).",
    "NO_ANSWER": "No TXT records at this hostname.",
    "TIMEOUT": "DNS lookup timed out.",
    "DNS_ERROR": "DNS lookup failed.",
}


def create_resolver(settings: DnsSettings) -> dns.resolver.Resolver:
    """Create a fresh dns.resolver.Resolver configured from *settings*.

    A new instance is created every time to ensure thread safety.  The
    lifetime equals the per-server timeout, so one black-holed query
    cannot outlive the configured deadline.

    Args:
        settings: DnsSettings instance containing resolver config.

    Returns:
        A configured dns.resolver.Resolver instance.
    """
    resolver = dns.resolver.Resolver(configure=False)
    resolver.nameservers = settings.get_resolvers()
    resolver.timeout = float(settings.timeout_seconds)
    resolver.lifetime = float(settings.timeout_seconds)
    return resolver


def describe_dns_error(code: str | None) -> str:
    """Return a one-sentence explanation of a resolver error *code*."""
    if not code:
        return ""
    return _DNS_ERROR_DESCRIPTIONS.get(code, f"DNS error: {code}.")


class TxtSource(Protocol):
    """Anything that can answer TXT queries; checkers depend on this."""

    def resolve_txt(self, hostname: str) -> TxtLookup: ...


class TxtResolver:
    """Resolves TXT records for a hostname.

    Checkers take an instance of this class (or anything with the same
    ``resolve_txt`` method) instead of reaching for a module-level
    resolver, which keeps them testable with a fake.
    """

    def __init__(self, settings: DnsSettings | None = None) -> None:
        self.settings = settings or DnsSettings()

    def resolve_txt(self, hostname: str) -> TxtLookup:
        """Query TXT records for *hostname*.

        Returns:
            A TxtLookup.  On success ``records`` holds one decoded string
            per TXT record (whitespace-only records dropped); otherwise
            ``error`` is set and ``records`` is empty.
        """
        resolver = create_resolver(self.settings)

        try:
            answer = resolver.resolve(hostname, "TXT")
            records: list[str] = []
            for rdata in answer:
                # Long TXT values arrive split into several character-strings
                value = b"".join(rdata.strings).decode("utf-8", errors="replace").strip()
                if value:
                    records.append(value)

        except dns.resolver.NXDOMAIN:
            logger.info("NXDOMAIN for %s/TXT", hostname)
            return _failure(hostname, DnsErrorKind.NOT_FOUND, "NXDOMAIN")

        except dns.resolver.NoAnswer:
            logger.info("NoAnswer for %s/TXT", hostname)
            return _failure(hostname, DnsErrorKind.NOT_FOUND, "NO_ANSWER")

        except dns.resolver.NoNameservers:
            logger.warning("NoNameservers for %s/TXT", hostname)
            return _failure(
                hostname,
                DnsErrorKind.RESOLUTION_FAILURE,
                "DNS_ERROR",
                f"No nameservers available for {hostname} (SERVFAIL or all failed)",
            )

        except dns.exception.Timeout:
            logger.warning(
                "Timeout for %s/TXT after %.1fs", hostname, self.settings.timeout_seconds
            )
            return _failure(
                hostname,
                DnsErrorKind.TIMEOUT,
                "TIMEOUT",
                f"DNS query timed out for {hostname}/TXT",
            )

        except dns.exception.DNSException as exc:
            logger.error("DNSException for %s/TXT: %s", hostname, exc)
            return _failure(
                hostname,
                DnsErrorKind.RESOLUTION_FAILURE,
                "DNS_ERROR",
                f"DNS error for {hostname}/TXT: {exc}",
            )

        except Exception as exc:
            logger.exception("Unexpected error querying %s/TXT", hostname)
            return _failure(
                hostname,
                DnsErrorKind.RESOLUTION_FAILURE,
                "DNS_ERROR",
                f"Unexpected error for {hostname}/TXT: {exc}",
            )

        if not records:
            logger.info("Empty TXT answer for %s", hostname)
            return _failure(hostname, DnsErrorKind.NOT_FOUND, "NO_ANSWER")

        logger.debug("DNS query %s/TXT returned %d records", hostname, len(records))
        return TxtLookup(hostname=hostname, records=records)


def _failure(
    hostname: str,
    kind: DnsErrorKind,
    code: str,
    message: str | None = None,
) -> TxtLookup:
    return TxtLookup(
        hostname=hostname,
        records=[],
        error=kind,
        error_code=code,
        error_message=message or describe_dns_error(code),
    )
