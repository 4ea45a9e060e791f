"""RegistrySink port - write-back of derived aspects."""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol

from sleuther.domain.shared.port import Port


class RegistrySink(Port, Protocol):
    @abstractmethod
    async def put_aspects(
        self,
        record_id: str,
        aspects: Mapping[str, dict[str, Any]],
        revision: str | None = None,
    ) -> None:
        """Upsert all ``aspects`` on the record in one atomic operation.

        Raises:
            RegistryUnavailableError: Transient failure; nothing was written.
            ConflictError: ``revision`` no longer matches; nothing was written.
            RegistryRejectedError: Permanent refusal; nothing was written.
        """
        ...
