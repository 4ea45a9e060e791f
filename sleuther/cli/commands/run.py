"""Evaluate records from the configured registry."""

import sys

from dishka import AsyncContainer

from sleuther.cli.console import get_console
from sleuther.cli.runtime import bootstrap, run_in_container
from sleuther.domain.record.port.source import RecordSource
from sleuther.domain.shared.error import SleutherError
from sleuther.domain.sleuth.model.value import SleuthReport
from sleuther.domain.sleuth.service.orchestrator import Sleuther


def run(*, limit: int | None = None, record: str | None = None) -> None:
    """Sleuth records from the registry and write back their quality aspects.

    Args:
        limit: Stop after this many records.
        record: Evaluate only this record id (as when a change is delivered).
    """
    console = get_console()
    config = bootstrap()

    async def work(scope: AsyncContainer) -> SleuthReport:
        sleuther = await scope.get(Sleuther)
        source = await scope.get(RecordSource)
        if record is not None:
            report = SleuthReport()
            report.add(await sleuther.sleuth_by_id(source, record))
            return report
        return await sleuther.run(source, limit=limit)

    try:
        report = run_in_container(config, work)
    except SleutherError as e:
        console.error(e.message, hint=f"Registry: {config.registry.base_url}")
        sys.exit(1)

    console.outcomes(report.outcomes)
    console.report(report)
    if report.failed:
        sys.exit(1)
