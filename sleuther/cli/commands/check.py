"""Probe URLs directly."""

import sys

from dishka import AsyncContainer

from sleuther.cli.console import get_console
from sleuther.cli.runtime import bootstrap, run_in_container
from sleuther.domain.linkcheck.model.value import LinkCheckResult, LinkStatus
from sleuther.domain.linkcheck.service.checker import LinkChecker
from sleuther.domain.record.service.urls import is_known_protocol


def check(*urls: str) -> None:
    """Probe URLs and print their link-health classification.

    Args:
        urls: URLs to probe (http, https or ftp).
    """
    console = get_console()
    config = bootstrap()

    known = [u for u in urls if is_known_protocol(u)]
    for url in urls:
        if url not in known:
            console.warning(f"Ignoring {url}: unsupported scheme")
    if not known:
        console.error("No URLs to check")
        sys.exit(1)

    async def work(scope: AsyncContainer) -> dict[str, LinkCheckResult]:
        checker = await scope.get(LinkChecker)
        return await checker.check_all(known)

    results = run_in_container(config, work)
    console.link_statuses(
        [(url, r.status, r.attempts, r.http_status_code) for url, r in results.items()]
    )
    if any(r.status is not LinkStatus.SUCCESS for r in results.values()):
        sys.exit(1)
