"""The ``source-link-status`` derived aspect."""

from typing import Any

from pydantic import Field

from sleuther.domain.linkcheck.model.value import LinkCheckResult, LinkStatus
from sleuther.domain.shared.model.value import AspectPayload

LINK_STATUS_ASPECT = "source-link-status"


class UrlStatus(AspectPayload):
    status: LinkStatus
    attempts: int
    deferrals: int = 0
    http_status_code: int | None = Field(default=None, alias="httpStatusCode")
    error_details: str | None = Field(default=None, alias="errorDetails")

    @classmethod
    def from_result(cls, result: LinkCheckResult) -> "UrlStatus":
        return cls(
            status=result.status,
            attempts=result.attempts,
            deferrals=result.deferrals,
            http_status_code=result.http_status_code,
            error_details=result.error,
        )


class LinkStatusAspect(AspectPayload):
    """URL -> terminal status, in first-seen URL order.

    On the wire the aspect is the URL mapping itself:
    ``{url: {status, attempts, deferrals, httpStatusCode?, errorDetails?}}``.
    """

    urls: dict[str, UrlStatus] = Field(default_factory=dict)

    @classmethod
    def from_results(cls, results: dict[str, LinkCheckResult]) -> "LinkStatusAspect":
        return cls(urls={url: UrlStatus.from_result(r) for url, r in results.items()})

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "LinkStatusAspect":
        return cls(urls=payload)

    def to_payload(self) -> dict[str, Any]:
        return {url: status.to_payload() for url, status in self.urls.items()}

    def status_of(self, url: str) -> LinkStatus | None:
        entry = self.urls.get(url)
        return entry.status if entry else None
