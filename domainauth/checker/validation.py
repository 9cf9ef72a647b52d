"""
Syntactic checks for domain names and DKIM selectors.

Pure functions, no DNS traffic.
"""

from __future__ import annotations

import re

MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63

_DOMAIN_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
# Selectors are often generated by providers and may carry underscores
_SELECTOR_LABEL_RE = re.compile(r"^[A-Za-z0-9_](?:[A-Za-z0-9_-]*[A-Za-z0-9_])?$")


def is_valid_domain(domain: str) -> bool:
    """Return True if *domain* is a syntactically valid multi-label hostname.

    Rejects empty strings, leading or trailing dots, empty labels, labels
    with characters outside ``[A-Za-z0-9-]`` or starting/ending with a
    hyphen, labels longer than 63 characters, names longer than 253
    characters and single-label names.
    """
    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return False
    labels = domain.split(".")
    if len(labels) < 2:
        return False
    return all(_is_valid_label(label, _DOMAIN_LABEL_RE) for label in labels)


def is_valid_selector(selector: str) -> bool:
    """Return True if *selector* can prefix ``._domainkey.<domain>``."""
    if not selector or len(selector) > MAX_DOMAIN_LENGTH:
        return False
    return all(_is_valid_label(label, _SELECTOR_LABEL_RE) for label in selector.split("."))


def _is_valid_label(label: str, pattern: re.Pattern[str]) -> bool:
    if not label or len(label) > MAX_LABEL_LENGTH:
        return False
    return pattern.fullmatch(label) is not None
