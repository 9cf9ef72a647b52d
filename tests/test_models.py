"""
Unit tests for domainauth/models.py and domainauth/checker/report.py
"""

from __future__ import annotations

import json

import pytest

from domainauth.checker.report import render_text
from domainauth.checker.results import invalid_domain_result
from domainauth.models import (
    DEFAULT_NAMESERVERS,
    DnsSettings,
    DomainAuthReport,
    ErrorKind,
    RecordCheckResult,
)


def _report() -> DomainAuthReport:
    dmarc = RecordCheckResult(
        present=True,
        valid=True,
        lookup_hostname="_dmarc.example.com",
        record="v=DMARC1; p=none",
        parsed={"v": "DMARC1", "p": "none"},
        warnings=("DMARC policy is p=none (monitoring only); consider p=quarantine or p=reject",),
    )
    dkim = RecordCheckResult(
        present=False,
        valid=False,
        lookup_hostname="mail._domainkey.example.com",
        error="No DKIM record found at mail._domainkey.example.com.",
        error_kind=ErrorKind.RECORD_ABSENT,
        dns_error_code="NXDOMAIN",
        suggestion="Publish the DKIM TXT record.",
    )
    return DomainAuthReport(domain="example.com", selector="mail", dmarc=dmarc, dkim=dkim)


# ---------------------------------------------------------------------------
# Tests - DnsSettings
# ---------------------------------------------------------------------------


def test_dns_settings_from_comma_separated_string():
    settings = DnsSettings.from_config(
        {"DNS_RESOLVERS": "9.9.9.9, 1.0.0.1,", "DNS_TIMEOUT_SECONDS": "3"}
    )

    assert settings.nameservers == ["9.9.9.9", "1.0.0.1"]
    assert settings.timeout_seconds == 3.0


def test_dns_settings_from_list():
    settings = DnsSettings.from_config({"DNS_RESOLVERS": ["9.9.9.9"]})

    assert settings.get_resolvers() == ["9.9.9.9"]
    assert settings.timeout_seconds == 5.0


def test_dns_settings_fall_back_to_default_nameservers():
    assert DnsSettings.from_config({}).get_resolvers() == DEFAULT_NAMESERVERS


def test_dns_settings_keep_explicit_timeout():
    assert DnsSettings.from_config({"DNS_TIMEOUT_SECONDS": 0.5}).timeout_seconds == 0.5
    assert DnsSettings.from_config({"DNS_TIMEOUT_SECONDS": ""}).timeout_seconds == 5.0


@pytest.mark.parametrize("timeout", [0, "0", -2.5])
def test_dns_settings_reject_non_positive_timeout(timeout):
    with pytest.raises(ValueError, match="DNS_TIMEOUT_SECONDS"):
        DnsSettings.from_config({"DNS_TIMEOUT_SECONDS": timeout})


# ---------------------------------------------------------------------------
# Tests - serialisation
# ---------------------------------------------------------------------------


def test_report_to_dict_is_json_serialisable():
    data = _report().to_dict()

    json.dumps(data)
    assert data["dkim"]["error_kind"] == "record_absent"
    assert data["dmarc"]["error_kind"] is None
    assert data["dmarc"]["warnings"] == [
        "DMARC policy is p=none (monitoring only); consider p=quarantine or p=reject"
    ]


def test_invalid_domain_result_to_dict():
    data = invalid_domain_result().to_dict()

    assert data["present"] is False
    assert data["valid"] is False
    assert data["error"] == "Invalid domain format."
    assert data["lookup_hostname"] == ""
    assert data["suggestion"] is None


# ---------------------------------------------------------------------------
# Tests - text rendering
# ---------------------------------------------------------------------------


def test_render_text():
    text = render_text(_report())

    assert text.startswith("Domain: example.com  DKIM selector: mail\n")
    assert "DMARC: VALID" in text
    assert "  Record:     v=DMARC1; p=none" in text
    assert "  Warning:    DMARC policy is p=none" in text
    assert "DKIM: MISSING" in text
    assert "  Suggestion: Publish the DKIM TXT record." in text


def test_render_text_invalid_domain():
    result = invalid_domain_result()
    text = render_text(DomainAuthReport(domain="", selector="mail", dmarc=result, dkim=result))

    assert "Domain: (empty)" in text
    assert "Host:" not in text
    assert text.count("Error:      Invalid domain format.") == 2
