"""Per-URL check state machine.

    pending --probe--> probing --2xx/3xx--> success
                          |--404/410------> notfound
                          |--error--------> backoff_wait --probe--> probing
                          |                 (error once attempts hit the ceiling)
                          +--429----------> deferred_wait --probe--> probing
                                            (deferred once deferrals pass the ceiling)
"""

from dataclasses import dataclass
from enum import StrEnum

from sleuther.domain.linkcheck.model.value import LinkCheckResult, LinkStatus, ProbeClass
from sleuther.domain.shared.error import InvalidStateError


class UrlState(StrEnum):
    PENDING = "pending"
    PROBING = "probing"
    BACKOFF_WAIT = "backoff_wait"
    DEFERRED_WAIT = "deferred_wait"
    SUCCESS = "success"
    NOTFOUND = "notfound"
    ERROR = "error"
    DEFERRED = "deferred"


TERMINAL_STATES = frozenset(
    {UrlState.SUCCESS, UrlState.NOTFOUND, UrlState.ERROR, UrlState.DEFERRED}
)
_DISPATCHABLE = frozenset({UrlState.PENDING, UrlState.BACKOFF_WAIT, UrlState.DEFERRED_WAIT})
_TERMINAL_STATUS = {
    UrlState.SUCCESS: LinkStatus.SUCCESS,
    UrlState.NOTFOUND: LinkStatus.NOTFOUND,
    UrlState.ERROR: LinkStatus.ERROR,
    UrlState.DEFERRED: LinkStatus.DEFERRED,
}


@dataclass
class UrlCheck:
    """Mutable check progress for a single URL.

    ``attempts`` counts probes charged to the retry budget; rate-limited
    probes only increment ``deferrals``.
    """

    url: str
    max_attempts: int
    max_deferrals: int | None = None
    state: UrlState = UrlState.PENDING
    attempts: int = 0
    deferrals: int = 0
    last_status_code: int | None = None
    last_error: str | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.max_deferrals is not None and self.max_deferrals < 0:
            raise ValueError("max_deferrals must be >= 0")

    @property
    def terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def begin_probe(self) -> None:
        if self.state not in _DISPATCHABLE:
            raise InvalidStateError(f"Cannot probe {self.url} in state {self.state}")
        self.state = UrlState.PROBING

    def record(
        self,
        outcome: ProbeClass,
        status_code: int | None = None,
        error: str | None = None,
    ) -> UrlState:
        """Apply a probe outcome and return the new state."""
        if self.state is not UrlState.PROBING:
            raise InvalidStateError(f"No probe in flight for {self.url} (state {self.state})")

        self.last_status_code = status_code
        self.last_error = error

        if outcome is ProbeClass.RATE_LIMITED:
            self.deferrals += 1
            if self.max_deferrals is not None and self.deferrals > self.max_deferrals:
                self.state = UrlState.DEFERRED
            else:
                self.state = UrlState.DEFERRED_WAIT
            return self.state

        self.attempts += 1
        if outcome is ProbeClass.SUCCESS:
            self.state = UrlState.SUCCESS
        elif outcome is ProbeClass.NOTFOUND:
            self.state = UrlState.NOTFOUND
        elif self.attempts >= self.max_attempts:
            self.state = UrlState.ERROR
        else:
            self.state = UrlState.BACKOFF_WAIT
        return self.state

    def result(self) -> LinkCheckResult:
        if not self.terminal:
            raise InvalidStateError(f"{self.url} has not reached a terminal state ({self.state})")
        return LinkCheckResult(
            url=self.url,
            status=_TERMINAL_STATUS[self.state],
            attempts=self.attempts,
            deferrals=self.deferrals,
            http_status_code=self.last_status_code,
            error=self.last_error,
        )
