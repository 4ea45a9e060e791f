"""Unit tests for AspectWriter."""

import pytest

from sleuther.domain.linkcheck.model import LINK_STATUS_ASPECT, LinkStatusAspect
from sleuther.domain.rating.model import QUALITY_RATING_ASPECT, QualityRatingAspect
from sleuther.domain.record.model import Record
from sleuther.domain.shared.error import (
    AspectWriteError,
    ConflictError,
    RegistryRejectedError,
    RegistryUnavailableError,
)
from sleuther.domain.sleuth.service import AspectWriter
from sleuther.infrastructure.registry.memory import InMemoryRegistry
from tests.fakes import FakeClock, RecordingSink


@pytest.fixture
def record() -> Record:
    return Record(id="rec-1", revision="7")


@pytest.fixture
def aspects() -> dict:
    return {
        QUALITY_RATING_ASPECT: QualityRatingAspect(stars=2),
        LINK_STATUS_ASPECT: LinkStatusAspect(),
    }


def make_writer(sink: RecordingSink, clock: FakeClock, max_attempts: int = 3) -> AspectWriter:
    return AspectWriter(
        sink=sink, max_attempts=max_attempts, backoff_base=0.5, backoff_factor=2.0, sleep=clock.sleep
    )


class TestAspectWriter:
    @pytest.mark.asyncio
    async def test_writes_every_aspect_in_one_call(self, record, aspects, clock):
        sink = RecordingSink()

        await make_writer(sink, clock).write(record, aspects)

        assert len(sink.calls) == 1
        record_id, payload, revision = sink.calls[0]
        assert record_id == "rec-1"
        assert revision == "7"
        assert payload == {
            LINK_STATUS_ASPECT: {},
            QUALITY_RATING_ASPECT: {"stars": 2, "evidence": []},
        }

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self, record, aspects, clock):
        sink = RecordingSink(
            [RegistryUnavailableError("503"), RegistryUnavailableError("502")]
        )

        await make_writer(sink, clock).write(record, aspects)

        assert len(sink.calls) == 3
        assert clock.sleeps == [0.5, 1.0]
        assert set(sink.written["rec-1"]) == {LINK_STATUS_ASPECT, QUALITY_RATING_ASPECT}

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise(self, record, aspects, clock):
        sink = RecordingSink([RegistryUnavailableError("down")] * 3)

        with pytest.raises(AspectWriteError) as exc_info:
            await make_writer(sink, clock).write(record, aspects)

        assert exc_info.value.record_id == "rec-1"
        assert exc_info.value.attempts == 3
        assert sink.written == {}

    @pytest.mark.asyncio
    async def test_rejection_is_not_retried(self, record, aspects, clock):
        sink = RecordingSink([RegistryRejectedError("bad patch", status_code=400)])

        with pytest.raises(AspectWriteError):
            await make_writer(sink, clock).write(record, aspects)

        assert len(sink.calls) == 1
        assert clock.sleeps == []


class TestRevisionConflicts:
    @pytest.mark.asyncio
    async def test_conflict_retries_against_current_revision(self, aspects, clock):
        registry = InMemoryRegistry([Record(id="r1", revision="2")])
        writer = AspectWriter(sink=registry, source=registry, sleep=clock.sleep)

        await writer.write(Record(id="r1", revision="1"), aspects)

        assert len(registry.writes) == 1
        assert clock.sleeps == [0.5]
        stored = await registry.get_record("r1")
        assert set(stored.aspects) == {LINK_STATUS_ASPECT, QUALITY_RATING_ASPECT}

    @pytest.mark.asyncio
    async def test_conflict_without_source_keeps_failing(self, aspects, clock):
        registry = InMemoryRegistry([Record(id="r1", revision="2")])
        writer = AspectWriter(sink=registry, sleep=clock.sleep)

        with pytest.raises(AspectWriteError):
            await writer.write(Record(id="r1", revision="1"), aspects)

        assert registry.writes == []

    @pytest.mark.asyncio
    async def test_record_deleted_during_conflict(self, aspects, clock):
        sink = RecordingSink([ConflictError("revision moved")])
        source = InMemoryRegistry()
        writer = AspectWriter(sink=sink, source=source, sleep=clock.sleep)

        with pytest.raises(AspectWriteError) as exc_info:
            await writer.write(Record(id="r1", revision="1"), aspects)

        assert "no longer exists" in str(exc_info.value)
        assert len(sink.calls) == 1

    @pytest.mark.asyncio
    async def test_retried_write_sends_new_revision(self, aspects, clock):
        sink = RecordingSink([ConflictError("revision moved")])
        source = InMemoryRegistry([Record(id="r1", revision="5")])
        writer = AspectWriter(sink=sink, source=source, sleep=clock.sleep)

        await writer.write(Record(id="r1", revision="4"), aspects)

        assert [revision for _, _, revision in sink.calls] == ["4", "5"]
