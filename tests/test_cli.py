"""
Tests for the domainauth-check command-line entry point.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from conftest import FakeResolver, rsa_public_key_b64
from domainauth.cli import EXIT_INVALID, EXIT_OK, main

_PATCH_RESOLVER = "domainauth.cli.TxtResolver"


def _valid_resolver() -> FakeResolver:
    return FakeResolver(
        {
            "_dmarc.example.com": ["v=DMARC1; p=reject; rua=mailto:x@y.com"],
            "mail._domainkey.example.com": [f"v=DKIM1; p={rsa_public_key_b64(2048)}"],
        }
    )


def test_cli_valid_domain_exits_zero(capsys):
    with patch(_PATCH_RESOLVER, return_value=_valid_resolver()):
        exit_code = main(["example.com"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_OK
    assert "DMARC: VALID" in out
    assert "DKIM: VALID" in out


def test_cli_missing_records_exit_invalid(capsys):
    with patch(_PATCH_RESOLVER, return_value=FakeResolver()):
        exit_code = main(["example.com", "--selector", "google"])

    out = capsys.readouterr().out
    assert exit_code == EXIT_INVALID
    assert "DKIM: MISSING" in out
    assert "google._domainkey.example.com" in out
    assert "Suggestion:" in out


def test_cli_json_output(capsys):
    with patch(_PATCH_RESOLVER, return_value=_valid_resolver()):
        main(["example.com", "--json"])

    data = json.loads(capsys.readouterr().out)
    assert data["domain"] == "example.com"
    assert data["dmarc"]["parsed"]["p"] == "reject"


def test_cli_json_output_for_several_domains(capsys):
    with patch(_PATCH_RESOLVER, return_value=_valid_resolver()):
        exit_code = main(["example.com", "example.org", "--json"])

    data = json.loads(capsys.readouterr().out)
    assert [item["domain"] for item in data] == ["example.com", "example.org"]
    assert exit_code == EXIT_INVALID


def test_cli_passes_nameservers_and_timeout():
    with patch(_PATCH_RESOLVER, return_value=_valid_resolver()) as MockResolver:
        main(["example.com", "--nameserver", "9.9.9.9", "--timeout", "3"])

    settings = MockResolver.call_args.args[0]
    assert settings.nameservers == ["9.9.9.9"]
    assert settings.timeout_seconds == 3.0


@pytest.mark.parametrize("timeout", ["0", "-1", "soon"])
def test_cli_rejects_non_positive_timeout(timeout, capsys):
    with patch(_PATCH_RESOLVER, return_value=_valid_resolver()) as MockResolver:
        with pytest.raises(SystemExit) as excinfo:
            main(["example.com", "--timeout", timeout])

    assert excinfo.value.code != 0
    assert "--timeout" in capsys.readouterr().err
    MockResolver.assert_not_called()
