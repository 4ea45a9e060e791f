"""Outcome of sleuthing one record, and of a batch run."""

from dataclasses import dataclass, field
from enum import StrEnum

from sleuther.domain.linkcheck.model.aspect import LinkStatusAspect
from sleuther.domain.rating.model.aspect import QualityRatingAspect


class OutcomeStatus(StrEnum):
    WRITTEN = "written"  # derived aspects persisted
    SKIPPED = "skipped"  # nothing to write
    FAILED = "failed"  # write-back failed; record unmodified


@dataclass(frozen=True)
class SleuthOutcome:
    record_id: str
    status: OutcomeStatus
    link_status: LinkStatusAspect | None = None
    rating: QualityRatingAspect | None = None
    errors: tuple[str, ...] = ()


@dataclass
class SleuthReport:
    """Tally of a batch run."""

    written: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: list[SleuthOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.written + self.skipped + self.failed

    def add(self, outcome: SleuthOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status is OutcomeStatus.WRITTEN:
            self.written += 1
        elif outcome.status is OutcomeStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
