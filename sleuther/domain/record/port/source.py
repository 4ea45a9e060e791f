"""RecordSource port - where records needing evaluation come from."""

from abc import abstractmethod
from collections.abc import AsyncGenerator
from typing import Protocol

from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.shared.port import Port


class RecordSource(Port, Protocol):
    @abstractmethod
    def iter_records(self) -> AsyncGenerator[Record, None]:
        """Yield every record carrying distributions, page by page."""
        ...

    @abstractmethod
    async def get_record(self, record_id: str) -> Record | None: ...
