"""DI provider for link probing."""

from typing import AsyncIterable, NewType

import httpx
from dishka import provide

from sleuther.config import Config
from sleuther.domain.linkcheck.port.prober import Prober
from sleuther.domain.linkcheck.service.checker import LinkChecker
from sleuther.domain.linkcheck.service.gate import RateLimitGate
from sleuther.infrastructure.probe.ftp import FtpProber
from sleuther.infrastructure.probe.http import HttpProber
from sleuther.infrastructure.probe.router import SchemeProber
from sleuther.util.di.base import Provider
from sleuther.util.di.scope import Scope

# Disambiguate from the registry httpx.AsyncClient
ProbeHttpClient = NewType("ProbeHttpClient", httpx.AsyncClient)


class ProbeProvider(Provider):
    """Probers, the shared rate-limit gate and the link checker (all APP-scoped)."""

    @provide(scope=Scope.APP)
    async def get_probe_http_client(self, config: Config) -> AsyncIterable[ProbeHttpClient]:
        """Dedicated HTTP client for link probes; closed with the container."""
        cfg = config.link_check
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(cfg.timeout),
            headers={"User-Agent": cfg.user_agent},
            limits=httpx.Limits(max_connections=cfg.max_concurrency),
        )
        async with client:
            yield ProbeHttpClient(client)

    @provide(scope=Scope.APP)
    def get_prober(self, client: ProbeHttpClient, config: Config) -> Prober:
        http = HttpProber(client=client)
        return SchemeProber(
            {"http": http, "https": http, "ftp": FtpProber(timeout=config.link_check.timeout)}
        )

    @provide(scope=Scope.APP)
    def get_rate_limit_gate(self, config: Config) -> RateLimitGate:
        cfg = config.link_check
        return RateLimitGate(
            cooldown=cfg.rate_limit_cooldown,
            scope=cfg.rate_limit_scope,
            max_cooldown=cfg.max_cooldown,
        )

    @provide(scope=Scope.APP)
    def get_link_checker(
        self, prober: Prober, gate: RateLimitGate, config: Config
    ) -> LinkChecker:
        return LinkChecker(prober=prober, config=config.link_check, gate=gate)
