"""Unit tests for InMemoryRegistry."""

import json

import pytest

from sleuther.domain.record.model import Record
from sleuther.domain.shared.error import ConflictError, RegistryRejectedError
from sleuther.infrastructure.registry.memory import InMemoryRegistry


class TestFromFile:
    def test_single_record(self, tmp_path, factory):
        record = factory.record([factory.distribution(format="CSV")])
        path = tmp_path / "record.json"
        path.write_text(record.model_dump_json())

        registry = InMemoryRegistry.from_file(path)

        assert [r.id for r in registry.records()] == [record.id]

    def test_list_and_page(self, tmp_path):
        listing = tmp_path / "list.json"
        listing.write_text(json.dumps([{"id": "a"}, {"id": "b"}]))
        page = tmp_path / "page.json"
        page.write_text(json.dumps({"records": [{"id": "c"}], "hasMore": False}))

        assert [r.id for r in InMemoryRegistry.from_file(listing).records()] == ["a", "b"]
        assert [r.id for r in InMemoryRegistry.from_file(page).records()] == ["c"]


class TestPutAspects:
    @pytest.mark.asyncio
    async def test_merges_aspects(self):
        registry = InMemoryRegistry([Record(id="a", aspects={"keep": {"x": 1}})])

        await registry.put_aspects("a", {"source-link-status": {}})

        record = await registry.get_record("a")
        assert record.aspects == {"keep": {"x": 1}, "source-link-status": {}}

    @pytest.mark.asyncio
    async def test_stale_revision_conflicts(self):
        registry = InMemoryRegistry([Record(id="a", revision="2")])

        with pytest.raises(ConflictError):
            await registry.put_aspects("a", {"x": {}}, revision="1")

        assert registry.writes == []

    @pytest.mark.asyncio
    async def test_unknown_record_is_rejected(self):
        with pytest.raises(RegistryRejectedError) as exc_info:
            await InMemoryRegistry().put_aspects("nope", {"x": {}})
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_written_payloads_are_copies(self):
        registry = InMemoryRegistry([Record(id="a")])
        payload = {}

        await registry.put_aspects("a", {"source-link-status": payload})
        payload["https://x.example.org"] = {"status": "error", "attempts": 1}

        assert (await registry.get_record("a")).aspects["source-link-status"] == {}

    @pytest.mark.asyncio
    async def test_iterates_in_insertion_order(self):
        registry = InMemoryRegistry([Record(id="b"), Record(id="a")])
        assert [r.id async for r in registry.iter_records()] == ["b", "a"]
