"""Rate records from a JSON file without probing any links."""

from pathlib import Path

from dishka import AsyncContainer

from sleuther.cli.commands.inspect import load_registry
from sleuther.cli.console import get_console, stars_label
from sleuther.cli.runtime import bootstrap, run_in_container
from sleuther.domain.rating.service.rating import RatingEngine
from sleuther.domain.shared.error import MalformedAspectError


def rate(path: Path) -> None:
    """Print the open-data star rating of every record in a JSON file.

    Args:
        path: JSON file holding one record, a list of records, or a registry page.
    """
    console = get_console()
    config = bootstrap()
    registry = load_registry(path)

    async def work(scope: AsyncContainer) -> RatingEngine:
        return await scope.get(RatingEngine)

    engine = run_in_container(config, work)

    for record in registry.records():
        try:
            rating = engine.rate_record(record)
        except MalformedAspectError as e:
            console.warning(f"{record.id}: {e.message}")
            continue
        console.print(f"[bold]{record.id}[/bold] {stars_label(rating.stars)} ({rating.stars})")
        for evidence in rating.evidence:
            label = evidence.distribution_id or evidence.distribution_name or "?"
            console.print(
                f"  [dim]{label}:[/dim] "
                f"license={evidence.matched_license!r} format={evidence.matched_format!r}"
            )
