"""Unit tests for the DI container wiring."""

import pytest

from sleuther.application.di import create_container
from sleuther.config import Config
from sleuther.domain.linkcheck.service import LinkChecker
from sleuther.domain.rating.model import QUALITY_RATING_ASPECT
from sleuther.domain.rating.service import RatingEngine
from sleuther.domain.record.port import RecordSource, RegistrySink
from sleuther.domain.sleuth.service import Sleuther
from sleuther.infrastructure.registry.client import HttpRegistryClient
from sleuther.infrastructure.registry.di import InMemoryRegistryProvider
from sleuther.infrastructure.registry.memory import InMemoryRegistry
from sleuther.util.di.scope import Scope


class TestContainer:
    @pytest.mark.asyncio
    async def test_registry_ports_resolve_to_http_client(self):
        container = create_container(Config())
        try:
            source = await container.get(RecordSource)
            sink = await container.get(RegistrySink)
            assert isinstance(source, HttpRegistryClient)
            assert source is sink
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_link_checker_is_shared_across_units_of_work(self):
        container = create_container(Config())
        try:
            async with container(scope=Scope.UOW) as first:
                a = await first.get(Sleuther)
            async with container(scope=Scope.UOW) as second:
                b = await second.get(Sleuther)
            assert a is not b
            assert a.link_checker is b.link_checker
            assert a.link_checker is await container.get(LinkChecker)
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_rating_engine_uses_configured_tables(self):
        config = Config(rating={"extra_formats": {3: ["Avro"]}})
        container = create_container(config)
        try:
            engine = await container.get(RatingEngine)
            assert engine.tables.match_format("avro") == (3, "Avro")
        finally:
            await container.close()

    @pytest.mark.asyncio
    async def test_in_memory_registry_override(self, factory):
        record = factory.record([factory.distribution(license="CC BY", format="XML")])
        registry = InMemoryRegistry([record])
        container = create_container(Config(), InMemoryRegistryProvider(registry))
        try:
            async with container(scope=Scope.UOW) as scope:
                assert await scope.get(RecordSource) is registry
                sleuther = await scope.get(Sleuther)
                report = await sleuther.run(await scope.get(RecordSource))
        finally:
            await container.close()

        assert report.written == 1
        stored = await registry.get_record(record.id)
        assert stored.aspects[QUALITY_RATING_ASPECT]["stars"] == 3
