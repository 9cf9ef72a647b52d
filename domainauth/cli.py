"""
Command-line DMARC/DKIM check.

USAGE
=====
  # Check one domain with the default "mail" selector
  domainauth-check example.com

  # Check several domains with a provider selector
  domainauth-check example.com example.org --selector google

  # JSON output, custom nameserver and deadline, debug logging
  domainauth-check example.com --json --nameserver 9.9.9.9 --timeout 3 --verbose

EXIT CODES
==========
  0 - Every checked record is valid
  1 - Fatal error
  2 - At least one record is missing or invalid
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from domainauth.checker.engine import DEFAULT_BATCH_CONCURRENCY, DomainAuthChecker
from domainauth.checker.report import render_text
from domainauth.checker.resolver import TxtResolver
from domainauth.config import Config
from domainauth.models import DnsSettings

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INVALID = 2


def _positive_float(value: str) -> float:
    """argparse type for a strictly positive number of seconds."""
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return seconds


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="domainauth-check",
        description="Check the DMARC and DKIM records published for a domain.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("domains", nargs="+", metavar="DOMAIN", help="Domain(s) to check.")
    parser.add_argument(
        "--selector",
        default=Config.DEFAULT_DKIM_SELECTOR,
        help="DKIM selector to look up (default: %(default)s).",
    )
    parser.add_argument(
        "--nameserver",
        action="append",
        default=None,
        metavar="IP",
        help="Nameserver to query; repeat for several. Defaults to DNS_RESOLVERS.",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=Config.DNS_TIMEOUT_SECONDS,
        help="Per-query DNS deadline in seconds (default: %(default)s).",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_BATCH_CONCURRENCY,
        help="Domains checked in parallel (default: %(default)s).",
    )
    parser.add_argument("--json", action="store_true", default=False, help="Print JSON output.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable DEBUG-level logging output.",
    )
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> logging.Logger:
    """Configure root logger for the command.

    Logs go to stderr so stdout carries only the report.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    return logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the check and print the reports.

    Returns:
        Integer exit code (see module docstring).
    """
    args = _parse_args(argv)
    logger = _configure_logging(args.verbose)

    settings = DnsSettings.from_config(
        {
            "DNS_RESOLVERS": args.nameserver or Config.DNS_RESOLVERS,
            "DNS_TIMEOUT_SECONDS": args.timeout,
        }
    )
    checker = DomainAuthChecker(TxtResolver(settings))

    try:
        reports = checker.check_many(args.domains, args.selector, max_workers=args.concurrency)
    except Exception:
        logger.exception("FATAL: domain auth check failed.")
        return EXIT_FATAL

    if args.json:
        payload = [report.to_dict() for report in reports]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
    else:
        print("\n".join(render_text(report) for report in reports), end="")

    return EXIT_OK if all(report.all_valid for report in reports) else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
