from sleuther.domain.sleuth.model.value import OutcomeStatus, SleuthOutcome, SleuthReport

__all__ = ["OutcomeStatus", "SleuthOutcome", "SleuthReport"]
