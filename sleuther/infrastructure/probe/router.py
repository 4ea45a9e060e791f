"""Dispatches probes to the adapter for each URL scheme."""

from collections.abc import Mapping

from sleuther.domain.linkcheck.model.value import ProbeResponse
from sleuther.domain.linkcheck.port.prober import Prober
from sleuther.domain.record.service.urls import url_scheme
from sleuther.domain.shared.error import ProbeFailedError


class SchemeProber(Prober):
    def __init__(self, probers: Mapping[str, Prober]) -> None:
        self._probers = {scheme.lower(): prober for scheme, prober in probers.items()}

    async def probe(self, url: str) -> ProbeResponse:
        prober = self._probers.get(url_scheme(url))
        if prober is None:
            raise ProbeFailedError(url, "unsupported scheme")
        return await prober.probe(url)
