"""
Result and settings models for the domain authentication checker.

Plain dataclasses rather than database rows: every check builds its
results fresh and hands them to the caller, nothing is persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping

DEFAULT_NAMESERVERS = ["8.8.8.8", "1.1.1.1"]
DEFAULT_TIMEOUT_SECONDS = 5.0


class DnsErrorKind(str, enum.Enum):
    """Closed set of TXT lookup failures."""

    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    RESOLUTION_FAILURE = "resolution_failure"


class ParseErrorKind(str, enum.Enum):
    MALFORMED = "malformed"


class RecordKind(str, enum.Enum):
    DMARC = "dmarc"
    DKIM = "dkim"


class ErrorKind(str, enum.Enum):
    """Why a record check did not come back valid."""

    INVALID_DOMAIN_FORMAT = "invalid_domain_format"
    INVALID_SELECTOR_FORMAT = "invalid_selector_format"
    RECORD_ABSENT = "record_absent"
    DNS_TIMEOUT = "dns_timeout"
    DNS_RESOLUTION_FAILURE = "dns_resolution_failure"
    RECORD_MALFORMED = "record_malformed"
    RECORD_REVOKED = "record_revoked"
    CHECK_FAILED = "check_failed"


@dataclass
class DnsSettings:
    """Resolver configuration: nameservers and the per-query deadline."""

    nameservers: list[str] = field(default_factory=list)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> DnsSettings:
        """Build settings from a Flask config (or any mapping).

        ``DNS_RESOLVERS`` may be a list or a comma-separated string.

        Raises:
            ValueError: If ``DNS_TIMEOUT_SECONDS`` is not a positive number.
        """
        raw = config.get("DNS_RESOLVERS") or []
        if isinstance(raw, str):
            raw = raw.split(",")
        nameservers = [ns.strip() for ns in raw if ns and ns.strip()]

        raw_timeout = config.get("DNS_TIMEOUT_SECONDS")
        if raw_timeout is None or raw_timeout == "":
            timeout = DEFAULT_TIMEOUT_SECONDS
        else:
            timeout = float(raw_timeout)
        if timeout <= 0:
            raise ValueError(f"DNS_TIMEOUT_SECONDS must be positive, got {raw_timeout!r}")
        return cls(nameservers=nameservers, timeout_seconds=timeout)

    def get_resolvers(self) -> list[str]:
        return list(self.nameservers) or list(DEFAULT_NAMESERVERS)


@dataclass(frozen=True)
class TxtLookup:
    """Outcome of a single TXT query.

    ``records`` holds one string per TXT resource record, with the
    record's character-strings already concatenated.
    """

    hostname: str
    records: list[str] = field(default_factory=list)
    error: DnsErrorKind | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RecordCheckResult:
    """Outcome of checking one record type (DMARC or DKIM)."""

    present: bool
    valid: bool
    lookup_hostname: str
    record: str | None = None
    parsed: dict[str, str] | None = None
    error: str | None = None
    suggestion: str | None = None
    error_kind: ErrorKind | None = None
    dns_error_code: str | None = None
    warnings: tuple[str, ...] = ()
    key_size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "present": self.present,
            "valid": self.valid,
            "record": self.record,
            "parsed": dict(self.parsed) if self.parsed is not None else None,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "lookup_hostname": self.lookup_hostname,
            "dns_error_code": self.dns_error_code,
            "suggestion": self.suggestion,
            "warnings": list(self.warnings),
            "key_size": self.key_size,
        }


@dataclass(frozen=True)
class DomainAuthReport:
    """DMARC and DKIM results for one (domain, selector) pair."""

    domain: str
    selector: str
    dmarc: RecordCheckResult
    dkim: RecordCheckResult

    @property
    def all_valid(self) -> bool:
        return self.dmarc.valid and self.dkim.valid

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "selector": self.selector,
            "dmarc": self.dmarc.to_dict(),
            "dkim": self.dkim.to_dict(),
        }
