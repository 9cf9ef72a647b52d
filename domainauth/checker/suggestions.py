"""
Remediation text for failed DMARC and DKIM checks.

Every suggestion is a pure function of its inputs so reports can be
compared against fixed expected output.
"""

from __future__ import annotations

from dataclasses import dataclass

from domainauth.models import ErrorKind, RecordKind


@dataclass(frozen=True)
class SuggestionContext:
    domain: str
    lookup_hostname: str
    selector: str = ""


def suggest(kind: RecordKind, reason: ErrorKind, context: SuggestionContext) -> str | None:
    """Return a remediation hint for a *kind* record that failed with *reason*.

    Returns None when the failure cannot be fixed by publishing DNS data
    (an unusable domain name).
    """
    if reason is ErrorKind.INVALID_DOMAIN_FORMAT:
        return None
    if kind is RecordKind.DMARC:
        return _suggest_dmarc(reason, context)
    return _suggest_dkim(reason, context)


def example_dmarc_record(domain: str) -> str:
    return f"v=DMARC1; p=none; rua=mailto:postmaster@{domain}"


def _suggest_dmarc(reason: ErrorKind, ctx: SuggestionContext) -> str:
    example = example_dmarc_record(ctx.domain)
    host = ctx.lookup_hostname

    if reason is ErrorKind.RECORD_ABSENT:
        return (
            f'Add a TXT record at {host} with the value "{example}". '
            "Start in monitoring mode (p=none) and move to p=quarantine or "
            "p=reject once aggregate reports show legitimate mail passing."
        )
    if reason is ErrorKind.RECORD_MALFORMED:
        return (
            f"Replace the TXT record at {host} with a valid DMARC policy that "
            f"starts with v=DMARC1 and sets p=none, p=quarantine or p=reject, "
            f'for example "{example}".'
        )
    if reason is ErrorKind.DNS_TIMEOUT:
        return (
            f"The DMARC lookup for {host} timed out. Check that the "
            f"authoritative nameservers for {ctx.domain} answer TXT queries, "
            "then run the check again."
        )
    return (
        f"The DMARC lookup for {host} failed. Check the DNS delegation and "
        f"nameservers for {ctx.domain}, then make sure a TXT record such as "
        f'"{example}" is published at {host}.'
    )


def _suggest_dkim(reason: ErrorKind, ctx: SuggestionContext) -> str:
    host = ctx.lookup_hostname

    if reason is ErrorKind.INVALID_SELECTOR_FORMAT:
        return (
            "Enter the DKIM selector issued by your mail provider (for example "
            '"google" or "selector1"). The provider publishes its DKIM key as a '
            f"TXT record at <selector>._domainkey.{ctx.domain}."
        )
    if reason is ErrorKind.RECORD_ABSENT:
        return (
            "Generate a DKIM key pair with your mail provider and publish the "
            f"provider-issued TXT record at {host}. The record should contain "
            "v=DKIM1 and p= followed by the base64 public key."
        )
    if reason is ErrorKind.RECORD_REVOKED:
        return (
            f"The DKIM key at {host} is revoked (empty p=). If mail is still "
            f'signed with selector "{ctx.selector}", generate a new DKIM key pair '
            f"with your mail provider and publish its TXT record at {host}."
        )
    if reason is ErrorKind.RECORD_MALFORMED:
        return (
            f"Replace the TXT record at {host} with the DKIM record issued by your "
            "mail provider. It must include p= with the base64 public key and may "
            "start with v=DKIM1."
        )
    if reason is ErrorKind.DNS_TIMEOUT:
        return (
            f"The DKIM TXT record lookup for {host} timed out. Check that the authoritative "
            f"nameservers for {ctx.domain} answer TXT queries, then run the check again."
        )
    return (
        f"The DKIM lookup for {host} failed. Check the DNS delegation for "
        f"{ctx.domain} and confirm your provider's DKIM TXT record is published at {host}."
    )
