"""Prober port - issues one network probe for a URL."""

from abc import abstractmethod
from typing import Protocol

from sleuther.domain.linkcheck.model.value import ProbeResponse
from sleuther.domain.shared.port import Port


class Prober(Port, Protocol):
    @abstractmethod
    async def probe(self, url: str) -> ProbeResponse:
        """Probe ``url`` once.

        Raises:
            ProbeFailedError: On connection failure, timeout or protocol error.
        """
        ...
