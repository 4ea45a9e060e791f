"""In-memory registry for offline inspection of record files."""

import asyncio
import copy
import json
from collections.abc import AsyncGenerator, Iterable, Mapping
from pathlib import Path
from typing import Any

from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.record.port.sink import RegistrySink
from sleuther.domain.record.port.source import RecordSource
from sleuther.domain.shared.error import ConflictError, RegistryRejectedError


class InMemoryRegistry(RecordSource, RegistrySink):
    """Holds records in a dict and applies aspect writes atomically."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: dict[str, Record] = {r.id: r for r in records}
        self._lock = asyncio.Lock()
        self.writes: list[tuple[str, dict[str, Any]]] = []

    @classmethod
    def from_file(cls, path: Path) -> "InMemoryRegistry":
        """Load one record, a list of records, or a ``{"records": [...]}`` page."""
        data = json.loads(Path(path).read_text())
        if isinstance(data, dict):
            items = data.get("records", [data])
        else:
            items = data
        return cls(Record.model_validate(item) for item in items)

    def add(self, record: Record) -> None:
        self._records[record.id] = record

    def records(self) -> list[Record]:
        return list(self._records.values())

    async def iter_records(self) -> AsyncGenerator[Record, None]:
        for record in list(self._records.values()):
            yield record

    async def get_record(self, record_id: str) -> Record | None:
        return self._records.get(record_id)

    async def put_aspects(
        self,
        record_id: str,
        aspects: Mapping[str, dict[str, Any]],
        revision: str | None = None,
    ) -> None:
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                raise RegistryRejectedError(f"Record not found: {record_id}", status_code=404)
            if revision is not None and current.revision is not None and revision != current.revision:
                raise ConflictError(f"Record {record_id} is at revision {current.revision}")

            merged = {**current.aspects, **copy.deepcopy(dict(aspects))}
            self._records[record_id] = current.model_copy(update={"aspects": merged})
            self.writes.append((record_id, copy.deepcopy(dict(aspects))))
