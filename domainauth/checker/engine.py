"""
Check orchestration engine.

Coordinates the DMARC and DKIM checks for a domain:
- Normalises and validates the domain once, before any DNS traffic
- Runs both record checks concurrently with individual error isolation
- Assembles the DomainAuthReport
- Concurrent batch checking of several domains via ThreadPoolExecutor
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable

from domainauth.checker.dkim import check_dkim, dkim_hostname
from domainauth.checker.dmarc import check_dmarc, dmarc_hostname
from domainauth.checker.report import status_label
from domainauth.checker.resolver import TxtResolver, TxtSource
from domainauth.checker.results import check_failed_result, invalid_domain_result
from domainauth.checker.suggestions import SuggestionContext
from domainauth.checker.validation import is_valid_domain
from domainauth.models import DomainAuthReport, RecordCheckResult, RecordKind

logger = logging.getLogger(__name__)

DEFAULT_BATCH_CONCURRENCY = 5


class DomainAuthChecker:
    """Runs DMARC and DKIM checks against an injected TXT resolver.

    Holds no state besides the resolver, so one instance can serve
    concurrent callers for different domains.

    The checker adds no deadline of its own: each lookup is bounded only
    by the resolver.  TxtResolver caps every query at
    ``DnsSettings.timeout_seconds``; an injected TxtSource must enforce
    its own limit.
    """

    def __init__(self, resolver: TxtSource | None = None) -> None:
        self.resolver = resolver if resolver is not None else TxtResolver()

    def check(self, domain: str, selector: str) -> DomainAuthReport:
        """Check DMARC and DKIM for *domain* using DKIM *selector*.

        Never raises for any input string: an unusable domain yields the
        invalid-domain report without any DNS query.
        """
        domain = domain.strip().lower()
        selector = selector.strip().lower()

        if not is_valid_domain(domain):
            logger.info("Invalid domain format: %r", domain)
            result = invalid_domain_result()
            return DomainAuthReport(domain=domain, selector=selector, dmarc=result, dkim=result)

        start_time = time.monotonic()

        # The two lookups are independent; the wait below lasts as long as
        # the slower resolver call.
        with ThreadPoolExecutor(max_workers=2) as executor:
            dmarc_future = executor.submit(
                _run_safe_check,
                RecordKind.DMARC,
                lambda: check_dmarc(domain, self.resolver),
                SuggestionContext(domain=domain, lookup_hostname=dmarc_hostname(domain)),
            )
            dkim_future = executor.submit(
                _run_safe_check,
                RecordKind.DKIM,
                lambda: check_dkim(domain, selector, self.resolver),
                SuggestionContext(
                    domain=domain,
                    lookup_hostname=dkim_hostname(domain, selector),
                    selector=selector,
                ),
            )
            dmarc_result = dmarc_future.result()
            dkim_result = dkim_future.result()

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "Checked %s (selector=%s): dmarc=%s dkim=%s elapsed=%dms",
            domain,
            selector,
            status_label(dmarc_result),
            status_label(dkim_result),
            elapsed_ms,
        )
        return DomainAuthReport(
            domain=domain, selector=selector, dmarc=dmarc_result, dkim=dkim_result
        )

    def check_many(
        self,
        domains: Iterable[str],
        selector: str,
        max_workers: int = DEFAULT_BATCH_CONCURRENCY,
    ) -> list[DomainAuthReport]:
        """Check several domains in parallel.

        Returns:
            One report per input domain, in input order.
        """
        domain_list = list(domains)
        max_workers = max(1, min(max_workers, 10))  # clamp 1..10

        logger.info(
            "Starting batch check for %d domains (concurrency=%d)",
            len(domain_list),
            max_workers,
        )

        if max_workers == 1 or len(domain_list) <= 1:
            return [self.check(domain, selector) for domain in domain_list]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            reports = list(executor.map(lambda d: self.check(d, selector), domain_list))

        logger.info("Batch check complete: %d domains checked", len(reports))
        return reports


def check_domain_auth(
    domain: str,
    selector: str,
    resolver: TxtSource | None = None,
) -> DomainAuthReport:
    """Check DMARC and DKIM for *domain*; see DomainAuthChecker.check."""
    return DomainAuthChecker(resolver).check(domain, selector)


def check_many(
    domains: Iterable[str],
    selector: str,
    resolver: TxtSource | None = None,
    max_workers: int = DEFAULT_BATCH_CONCURRENCY,
) -> list[DomainAuthReport]:
    return DomainAuthChecker(resolver).check_many(domains, selector, max_workers=max_workers)


def _run_safe_check(
    kind: RecordKind,
    check_fn: Callable[[], RecordCheckResult],
    context: SuggestionContext,
) -> RecordCheckResult:
    """Execute a check function with error isolation.

    If the check raises, the exception is logged and turned into a
    CHECK_FAILED result so the other record's check is unaffected.
    """
    try:
        return check_fn()
    except Exception as exc:
        logger.exception("Error in %s check for %s", kind.value, context.lookup_hostname)
        return check_failed_result(kind, context, exc)
