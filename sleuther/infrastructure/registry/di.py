"""DI provider for the registry adapter."""

from typing import AsyncIterable, NewType

import httpx
from dishka import alias, provide

from sleuther.config import Config
from sleuther.domain.record.port.sink import RegistrySink
from sleuther.domain.record.port.source import RecordSource
from sleuther.infrastructure.registry.client import HttpRegistryClient, registry_headers
from sleuther.infrastructure.registry.memory import InMemoryRegistry
from sleuther.util.di.base import Provider
from sleuther.util.di.scope import Scope

RegistryHttpClient = NewType("RegistryHttpClient", httpx.AsyncClient)


class RegistryProvider(Provider):
    """One HttpRegistryClient serving as both record source and aspect sink."""

    @provide(scope=Scope.APP)
    async def get_registry_http_client(
        self, config: Config
    ) -> AsyncIterable[RegistryHttpClient]:
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.registry.timeout),
            headers=registry_headers(config.registry),
        )
        async with client:
            yield RegistryHttpClient(client)

    @provide(scope=Scope.APP)
    def get_registry_client(
        self, client: RegistryHttpClient, config: Config
    ) -> HttpRegistryClient:
        return HttpRegistryClient(client=client, config=config.registry)

    record_source = alias(source=HttpRegistryClient, provides=RecordSource)
    registry_sink = alias(source=HttpRegistryClient, provides=RegistrySink)


class InMemoryRegistryProvider(Provider):
    """Serves a prepared InMemoryRegistry in place of the HTTP registry."""

    def __init__(self, registry: InMemoryRegistry) -> None:
        super().__init__()
        self._registry = registry

    @provide(scope=Scope.APP)
    def get_in_memory_registry(self) -> InMemoryRegistry:
        return self._registry

    record_source = alias(source=InMemoryRegistry, provides=RecordSource)
    registry_sink = alias(source=InMemoryRegistry, provides=RegistrySink)
