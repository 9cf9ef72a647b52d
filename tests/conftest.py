"""
Shared pytest fixtures for the domain authentication checker test suite.

DNS is replaced by an in-memory fake resolver so tests are fully isolated
and issue no real lookups.
"""

from __future__ import annotations

import base64
import threading
from functools import lru_cache

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from domainauth import RESOLVER_EXTENSION, create_app
from domainauth.models import DnsErrorKind, TxtLookup


# ---------------------------------------------------------------------------
# Fake resolver
# ---------------------------------------------------------------------------


class FakeResolver:
    """In-memory stand-in for TxtResolver.

    ``answers`` maps a hostname to a list of TXT strings, a prepared
    TxtLookup, or an exception to raise.  Hostnames without an entry
    answer NXDOMAIN.  Every queried hostname is appended to ``calls``.
    """

    def __init__(self, answers: dict | None = None) -> None:
        self.answers: dict = dict(answers or {})
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def resolve_txt(self, hostname: str) -> TxtLookup:
        with self._lock:
            self.calls.append(hostname)
        answer = self.answers.get(hostname)
        if answer is None:
            return nxdomain(hostname)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, TxtLookup):
            return answer
        return TxtLookup(hostname=hostname, records=list(answer))


def nxdomain(hostname: str) -> TxtLookup:
    return TxtLookup(
        hostname=hostname,
        error=DnsErrorKind.NOT_FOUND,
        error_code="NXDOMAIN",
        error_message="DNS name does not exist (hostname not found).",
    )


def timed_out(hostname: str) -> TxtLookup:
    return TxtLookup(
        hostname=hostname,
        error=DnsErrorKind.TIMEOUT,
        error_code="TIMEOUT",
        error_message=f"DNS query timed out for {hostname}/TXT",
    )


def servfail(hostname: str) -> TxtLookup:
    return TxtLookup(
        hostname=hostname,
        error=DnsErrorKind.RESOLUTION_FAILURE,
        error_code="DNS_ERROR",
        error_message=f"No nameservers available for {hostname} (SERVFAIL or all failed)",
    )


@lru_cache(maxsize=None)
def rsa_public_key_b64(bits: int) -> str:
    """Return a base64 SubjectPublicKeyInfo RSA key of *bits* bits."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
    der = private_key.public_key().public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)
    return base64.b64encode(der).decode()


# ---------------------------------------------------------------------------
# Test configuration
# ---------------------------------------------------------------------------


class TestConfig:
    """Minimal Flask config for automated testing."""

    TESTING = True
    SECRET_KEY = "test-secret-key-not-for-production"
    DNS_RESOLVERS = "192.0.2.53"
    DNS_TIMEOUT_SECONDS = 2.0
    DEFAULT_DKIM_SELECTOR = "mail"


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="function")
def fake_resolver():
    """Return an empty FakeResolver; tests fill in ``answers``."""
    return FakeResolver()


@pytest.fixture(scope="function")
def app(fake_resolver):
    """Create a Flask application whose checks go to *fake_resolver*."""
    flask_app = create_app(TestConfig)
    flask_app.extensions[RESOLVER_EXTENSION] = fake_resolver
    yield flask_app


@pytest.fixture(scope="function")
def client(app):
    """Return a Flask test client."""
    return app.test_client()
