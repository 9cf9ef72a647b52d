"""
Unit tests for domainauth/checker/parser.py
"""

from __future__ import annotations

from domainauth.checker.parser import parse_tags
from domainauth.models import ParseErrorKind


def test_parse_well_formed_dmarc_record():
    """A well-formed record yields an ordered tag -> value mapping."""
    result = parse_tags("v=DMARC1; p=reject; rua=mailto:x@y.com", version="DMARC1")

    assert result.ok
    assert result.tags == {"v": "DMARC1", "p": "reject", "rua": "mailto:x@y.com"}
    assert list(result.tags) == ["v", "p", "rua"]


def test_whitespace_is_trimmed_and_tags_lowercased():
    result = parse_tags("  V = DMARC1 ;  P= quarantine  ;")

    assert result.tags == {"v": "DMARC1", "p": "quarantine"}


def test_value_may_contain_equals_sign():
    result = parse_tags("v=DKIM1; p=MIIBIjANBg==")

    assert result.tags["p"] == "MIIBIjANBg=="


def test_empty_segments_are_skipped():
    result = parse_tags(";;v=DMARC1;; ;p=none;")

    assert result.ok
    assert list(result.tags) == ["v", "p"]


def test_empty_value_is_kept():
    result = parse_tags("v=DKIM1; k=rsa; p=")

    assert result.tags["p"] == ""


def test_duplicate_tag_last_value_wins_first_position_kept():
    result = parse_tags("v=DMARC1; p=none; rua=mailto:a@x.com; p=reject")

    assert result.tags["p"] == "reject"
    assert list(result.tags) == ["v", "p", "rua"]


def test_segments_without_tag_shape_are_skipped():
    result = parse_tags("v=DMARC1; garbage; p=none; 1x=bad")

    assert result.tags == {"v": "DMARC1", "p": "none"}


def test_no_tag_value_pairs_is_malformed():
    result = parse_tags("this is not a record")

    assert not result.ok
    assert result.error is ParseErrorKind.MALFORMED
    assert result.tags == {}


def test_empty_string_is_malformed():
    assert parse_tags("").error is ParseErrorKind.MALFORMED


def test_version_must_be_first_tag():
    result = parse_tags("p=reject; v=DMARC1", version="DMARC1")

    assert result.error is ParseErrorKind.MALFORMED
    assert "v=DMARC1" in result.message


def test_version_value_must_match():
    result = parse_tags("v=spf1 include:_spf.example.com -all", version="DMARC1")

    assert result.error is ParseErrorKind.MALFORMED


def test_version_comparison_is_case_insensitive():
    result = parse_tags("v=dmarc1; p=none", version="DMARC1")

    assert result.ok


def test_first_tag_property():
    assert parse_tags("k=rsa; v=DKIM1; p=abc").first_tag == "k"
    assert parse_tags("nothing here").first_tag is None
