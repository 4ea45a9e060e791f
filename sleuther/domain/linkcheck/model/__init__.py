"""Link check domain model."""

from sleuther.domain.linkcheck.model.aspect import LINK_STATUS_ASPECT, LinkStatusAspect, UrlStatus
from sleuther.domain.linkcheck.model.state import TERMINAL_STATES, UrlCheck, UrlState
from sleuther.domain.linkcheck.model.value import (
    LinkCheckResult,
    LinkStatus,
    ProbeClass,
    ProbeResponse,
    classify_status,
)

__all__ = [
    "LINK_STATUS_ASPECT",
    "TERMINAL_STATES",
    "LinkCheckResult",
    "LinkStatus",
    "LinkStatusAspect",
    "ProbeClass",
    "ProbeResponse",
    "UrlCheck",
    "UrlState",
    "UrlStatus",
    "classify_status",
]
