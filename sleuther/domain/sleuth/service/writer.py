"""AspectWriter - atomic, retried write-back of derived aspects."""

import asyncio
import logging
from collections.abc import Mapping

import logfire

from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.record.port.sink import RegistrySink
from sleuther.domain.record.port.source import RecordSource
from sleuther.domain.shared.error import (
    AspectWriteError,
    ConflictError,
    RegistryRejectedError,
    RegistryUnavailableError,
)
from sleuther.domain.shared.model.value import AspectPayload
from sleuther.domain.shared.service import Service
from sleuther.domain.shared.timing import Sleep

logger = logging.getLogger(__name__)


class AspectWriter(Service):
    """Upserts all derived aspects of a record in a single sink call.

    Transient failures are retried with exponential backoff. On a revision
    conflict the record's current revision is read back from ``source``
    and the write is retried against it. A rejected write, or one that
    exhausts its attempts, raises ``AspectWriteError``; the sink applies
    nothing in that case, so the record is never left half-written.
    """

    sink: RegistrySink
    source: RecordSource | None = None
    max_attempts: int = 3
    backoff_base: float = 0.5
    backoff_factor: float = 2.0
    sleep: Sleep = asyncio.sleep

    async def write(self, record: Record, aspects: Mapping[str, AspectPayload]) -> None:
        payload = {name: aspect.to_payload() for name, aspect in sorted(aspects.items())}
        revision = record.revision

        with logfire.span("WriteAspects", record_id=record.id, aspects=list(payload)):
            for attempt in range(1, self.max_attempts + 1):
                try:
                    await self.sink.put_aspects(record.id, payload, revision=revision)
                    logger.debug(f"Wrote {sorted(payload)} to record {record.id}")
                    return
                except RegistryRejectedError as e:
                    raise AspectWriteError(record.id, attempt, e.message) from e
                except (RegistryUnavailableError, ConflictError) as e:
                    if attempt >= self.max_attempts:
                        raise AspectWriteError(record.id, attempt, e.message) from e
                    if isinstance(e, ConflictError):
                        revision = await self._current_revision(record, attempt, revision)
                    delay = self.backoff_base * self.backoff_factor ** (attempt - 1)
                    logger.warning(
                        f"Writing aspects for {record.id} failed ({e.code}), "
                        f"retrying in {delay:.1f}s (attempt {attempt}/{self.max_attempts})"
                    )
                    await self.sleep(delay)

    async def _current_revision(
        self, record: Record, attempt: int, revision: str | None
    ) -> str | None:
        if self.source is None:
            return revision
        try:
            latest = await self.source.get_record(record.id)
        except RegistryUnavailableError as e:
            logger.warning(f"Could not re-read record {record.id}: {e.message}")
            return revision
        if latest is None:
            raise AspectWriteError(record.id, attempt, "record no longer exists")
        logger.info(f"Record {record.id} moved to revision {latest.revision}")
        return latest.revision
