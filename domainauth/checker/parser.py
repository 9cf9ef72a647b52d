"""
Parser for the ``tag=value; tag=value`` grammar shared by DMARC and DKIM.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from domainauth.models import ParseErrorKind

_TAG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ParseResult:
    """Tagged parse outcome: ``tags`` on success, ``error`` on failure."""

    tags: dict[str, str] = field(default_factory=dict)
    error: ParseErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def first_tag(self) -> str | None:
        return next(iter(self.tags), None)


def parse_tags(raw: str, version: str | None = None) -> ParseResult:
    """Parse a TXT record body into an ordered tag -> value mapping.

    Segments are separated by semicolons and trimmed; empty segments and
    segments that are not ``tag=value`` are skipped.  Tags are lower-cased,
    the value is everything after the first ``=``.  A repeated tag keeps
    its first position but takes the last value.

    Args:
        raw: The record text.
        version: When given, the first tag must be ``v`` with this value
            (compared case-insensitively), e.g. ``"DMARC1"``.

    Returns:
        A ParseResult; ``error`` is ``ParseErrorKind.MALFORMED`` if no
        segment has the ``tag=value`` shape or the version check fails.
    """
    tags: dict[str, str] = {}
    for part in raw.split(";"):
        part = part.strip()
        if not part or "=" not in part:
            continue
        key, _, value = part.partition("=")
        key = key.strip()
        if not _TAG_RE.match(key):
            continue
        tags[key.lower()] = value.strip()

    if not tags:
        return ParseResult(
            error=ParseErrorKind.MALFORMED,
            message="Record contains no tag=value pairs.",
        )

    if version is not None:
        first = next(iter(tags))
        if first != "v" or tags[first].lower() != version.lower():
            return ParseResult(
                tags=tags,
                error=ParseErrorKind.MALFORMED,
                message=f"Record must start with v={version}.",
            )

    return ParseResult(tags=tags)
