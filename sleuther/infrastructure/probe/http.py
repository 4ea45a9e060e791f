"""HTTP(S) adapter for the Prober port."""

import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from sleuther.domain.linkcheck.model.value import ProbeResponse
from sleuther.domain.linkcheck.port.prober import Prober
from sleuther.domain.shared.error import ProbeFailedError

logger = logging.getLogger(__name__)

# Servers that refuse HEAD get a second chance with GET
_HEAD_UNSUPPORTED = frozenset({405, 501})


def parse_retry_after(value: str | None) -> float | None:
    """Seconds to wait from a Retry-After header (delta-seconds or HTTP-date)."""
    if not value:
        return None
    value = value.strip()
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max((when - datetime.now(UTC)).total_seconds(), 0.0)


class HttpProber(Prober):
    """Probes with HEAD, falling back to a streamed GET when HEAD is refused.

    The response body is never downloaded.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def probe(self, url: str) -> ProbeResponse:
        try:
            response = await self._client.head(url, follow_redirects=True)
            if response.status_code in _HEAD_UNSUPPORTED:
                logger.debug(f"HEAD refused by {url} ({response.status_code}), retrying with GET")
                async with self._client.stream("GET", url, follow_redirects=True) as streamed:
                    response = streamed
        except httpx.InvalidURL as e:
            raise ProbeFailedError(url, f"invalid URL: {e}") from e
        except httpx.TimeoutException as e:
            raise ProbeFailedError(url, f"timed out ({type(e).__name__})") from e
        except httpx.HTTPError as e:
            raise ProbeFailedError(url, f"{type(e).__name__}: {e}") from e

        return ProbeResponse(
            status_code=response.status_code,
            retry_after=parse_retry_after(response.headers.get("Retry-After")),
        )
