"""Plain-text rendering of a DomainAuthReport for terminals and logs."""

from __future__ import annotations

from domainauth.models import DomainAuthReport, RecordCheckResult


def status_label(result: RecordCheckResult) -> str:
    if result.valid:
        return "VALID"
    if result.present:
        return "INVALID"
    return "MISSING"


def render_text(report: DomainAuthReport) -> str:
    """Render *report* as a multi-line human-readable summary."""
    lines = [f"Domain: {report.domain or '(empty)'}  DKIM selector: {report.selector or '(empty)'}"]
    for name, result in (("DMARC", report.dmarc), ("DKIM", report.dkim)):
        lines.append("")
        lines.extend(_render_result(name, result))
    return "\n".join(lines) + "\n"


def _render_result(name: str, result: RecordCheckResult) -> list[str]:
    lines = [f"{name}: {status_label(result)}"]
    if result.lookup_hostname:
        lines.append(f"  Host:       {result.lookup_hostname}")
    if result.record is not None:
        lines.append(f"  Record:     {result.record}")
    if result.key_size is not None:
        lines.append(f"  Key size:   {result.key_size} bits")
    if result.error:
        lines.append(f"  Error:      {result.error}")
    for warning in result.warnings:
        lines.append(f"  Warning:    {warning}")
    if result.suggestion:
        lines.append(f"  Suggestion: {result.suggestion}")
    return lines
