"""Link check value objects."""

from enum import StrEnum

from sleuther.domain.shared.model.value import ValueObject


class LinkStatus(StrEnum):
    """Terminal classification of a URL."""

    SUCCESS = "success"
    ERROR = "error"
    NOTFOUND = "notfound"
    DEFERRED = "deferred"  # still rate-limited after max_deferrals re-probes


class ProbeClass(StrEnum):
    """Classification of a single probe response."""

    SUCCESS = "success"
    NOTFOUND = "notfound"
    ERROR = "error"
    RATE_LIMITED = "rate_limited"


RATE_LIMITED_STATUS = 429
NOT_FOUND_STATUSES = frozenset({404, 410})


class ProbeResponse(ValueObject):
    """What a prober observed for one request."""

    status_code: int
    retry_after: float | None = None  # seconds, from a Retry-After header


def classify_status(status_code: int) -> ProbeClass:
    """Map a response status onto the link-health taxonomy.

    2xx/3xx are reachable, 404/410 mean the resource is gone, 429 is a
    rate-limit signal, everything else is a (retryable) error.
    """
    if status_code == RATE_LIMITED_STATUS:
        return ProbeClass.RATE_LIMITED
    if status_code in NOT_FOUND_STATUSES:
        return ProbeClass.NOTFOUND
    if 200 <= status_code < 400:
        return ProbeClass.SUCCESS
    return ProbeClass.ERROR


class LinkCheckResult(ValueObject):
    """Terminal outcome for one URL."""

    url: str
    status: LinkStatus
    attempts: int  # probes counted against the retry budget
    deferrals: int = 0  # 429 responses, outside the retry budget
    http_status_code: int | None = None
    error: str | None = None
