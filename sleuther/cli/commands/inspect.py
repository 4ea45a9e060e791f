"""Evaluate records from a JSON file without touching the registry."""

import json
import sys
from pathlib import Path

from dishka import AsyncContainer
from pydantic import ValidationError

from sleuther.cli.console import get_console
from sleuther.cli.runtime import bootstrap, run_in_container
from sleuther.domain.sleuth.model.value import SleuthReport
from sleuther.domain.sleuth.service.orchestrator import Sleuther
from sleuther.infrastructure.registry.di import InMemoryRegistryProvider
from sleuther.infrastructure.registry.memory import InMemoryRegistry


def load_registry(path: Path) -> InMemoryRegistry:
    """Load records from ``path`` or exit with a readable error."""
    console = get_console()
    if not path.exists():
        console.error(f"File not found: {path}")
        sys.exit(1)
    try:
        return InMemoryRegistry.from_file(path)
    except (json.JSONDecodeError, ValidationError) as e:
        console.error(f"Could not read records from {path}", hint=str(e).splitlines()[0])
        sys.exit(1)


def inspect(path: Path, *, output: Path | None = None) -> None:
    """Probe links and rate every record in a JSON file.

    Args:
        path: JSON file holding one record, a list of records, or a registry page.
        output: Write the records, with their derived aspects, to this file.
    """
    console = get_console()
    config = bootstrap()
    registry = load_registry(path)

    async def work(scope: AsyncContainer) -> SleuthReport:
        sleuther = await scope.get(Sleuther)
        return await sleuther.run(registry)

    report = run_in_container(config, work, InMemoryRegistryProvider(registry))

    console.outcomes(report.outcomes)
    console.report(report)

    if output is not None:
        records = [r.model_dump(mode="json") for r in registry.records()]
        output.write_text(json.dumps(records, indent=2, ensure_ascii=False))
        console.info(f"Wrote {len(records)} records to {output}")
