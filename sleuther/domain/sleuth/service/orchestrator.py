"""Sleuther - evaluates records and writes their derived quality aspects."""

import asyncio
import contextlib
import logging

import logfire

from sleuther.domain.linkcheck.model.aspect import LINK_STATUS_ASPECT, LinkStatusAspect
from sleuther.domain.linkcheck.service.checker import LinkChecker
from sleuther.domain.rating.model.aspect import QUALITY_RATING_ASPECT, QualityRatingAspect
from sleuther.domain.rating.service.rating import RatingEngine
from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.record.port.source import RecordSource
from sleuther.domain.record.service.urls import extract_urls
from sleuther.domain.shared.error import AspectWriteError, NotFoundError
from sleuther.domain.shared.model.value import AspectPayload
from sleuther.domain.shared.service import Service
from sleuther.domain.sleuth.model.value import OutcomeStatus, SleuthOutcome, SleuthReport
from sleuther.domain.sleuth.service.writer import AspectWriter

logger = logging.getLogger(__name__)


class Sleuther(Service):
    """Runs link checking and rating for each record, then writes both at once.

    The two sub-computations run side by side and fail independently: a
    malformed payload or unexpected error in one only drops that aspect. The
    write happens after both have finished (every URL terminal), so a record
    gets one coherent write or, if cancelled before then, none.

    Batch runs evaluate up to ``max_concurrent_records`` records at a time and
    never let one record's failure affect another.
    """

    link_checker: LinkChecker
    rating_engine: RatingEngine
    writer: AspectWriter
    max_concurrent_records: int = 10

    async def sleuth(self, record: Record) -> SleuthOutcome:
        """Evaluate one record and write its derived aspects.

        Raises:
            AspectWriteError: If write-back failed after retries.
        """
        with logfire.span("SleuthRecord {record_id}", record_id=record.id):
            errors: list[str] = []
            link_status, rating = await asyncio.gather(
                self._check_links(record, errors),
                self._rate(record, errors),
            )

            aspects: dict[str, AspectPayload] = {}
            if link_status is not None:
                aspects[LINK_STATUS_ASPECT] = link_status
            if rating is not None:
                aspects[QUALITY_RATING_ASPECT] = rating

            if not aspects:
                logger.info(f"Nothing to write for record {record.id}")
                return SleuthOutcome(
                    record_id=record.id, status=OutcomeStatus.SKIPPED, errors=tuple(errors)
                )

            await self.writer.write(record, aspects)
            logfire.info(
                "Record sleuthed",
                record_id=record.id,
                urls=len(link_status.urls) if link_status else 0,
                stars=rating.stars if rating else None,
            )
            return SleuthOutcome(
                record_id=record.id,
                status=OutcomeStatus.WRITTEN,
                link_status=link_status,
                rating=rating,
                errors=tuple(errors),
            )

    async def sleuth_by_id(self, source: RecordSource, record_id: str) -> SleuthOutcome:
        """Re-fetch a changed record and evaluate its latest revision.

        Raises:
            NotFoundError: If the source no longer has the record.
        """
        record = await source.get_record(record_id)
        if record is None:
            raise NotFoundError(f"Record not found: {record_id}")
        return await self.sleuth(record)

    async def run(self, source: RecordSource, limit: int | None = None) -> SleuthReport:
        """Evaluate records from ``source`` with bounded concurrency.

        Dispatch blocks while ``max_concurrent_records`` records are in flight.

        Raises:
            SleutherError: If reading from ``source`` fails, once the records
                already dispatched have finished.
        """
        report = SleuthReport()
        slots = asyncio.Semaphore(self.max_concurrent_records)

        async def _evaluate(record: Record) -> None:
            try:
                report.add(await self._sleuth_isolated(record))
            finally:
                slots.release()

        dispatched = 0
        source_error: Exception | None = None
        async with asyncio.TaskGroup() as tg:
            try:
                async with contextlib.aclosing(source.iter_records()) as records:
                    async for record in records:
                        if limit is not None and dispatched >= limit:
                            break
                        await slots.acquire()
                        tg.create_task(_evaluate(record), name=f"sleuth-{record.id}")
                        dispatched += 1
            except Exception as e:
                # Records already dispatched still finish
                logger.error(f"Reading records failed after {dispatched} record(s): {e}")
                source_error = e

        if source_error is not None:
            raise source_error

        logger.info(
            f"Sleuthed {report.total} records: {report.written} written, "
            f"{report.skipped} skipped, {report.failed} failed"
        )
        return report

    async def _sleuth_isolated(self, record: Record) -> SleuthOutcome:
        try:
            return await self.sleuth(record)
        except AspectWriteError as e:
            logger.error(e.message)
            return SleuthOutcome(record_id=record.id, status=OutcomeStatus.FAILED, errors=(e.message,))
        except Exception as e:
            logger.exception(f"Sleuthing record {record.id} failed: {e}")
            return SleuthOutcome(record_id=record.id, status=OutcomeStatus.FAILED, errors=(str(e),))

    async def _check_links(self, record: Record, errors: list[str]) -> LinkStatusAspect | None:
        try:
            urls = extract_urls(record)
            if not urls:
                logger.debug(f"Record {record.id} has no checkable URLs")
                return None
            results = await self.link_checker.check_all(urls)
            return LinkStatusAspect.from_results(results)
        except Exception as e:
            logger.warning(f"Skipping link check for record {record.id}: {e}")
            errors.append(f"link-check: {e}")
            return None

    async def _rate(self, record: Record, errors: list[str]) -> QualityRatingAspect | None:
        try:
            return self.rating_engine.rate_record(record)
        except Exception as e:
            logger.warning(f"Skipping rating for record {record.id}: {e}")
            errors.append(f"rating: {e}")
            return None
