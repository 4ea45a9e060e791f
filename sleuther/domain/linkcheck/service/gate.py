"""Shared 429 cooldown gate."""

import asyncio
import logging
import time
from typing import Literal
from urllib.parse import urlsplit

from sleuther.domain.shared.timing import Clock, Sleep

logger = logging.getLogger(__name__)

GLOBAL_KEY = "*"


class RateLimitGate:
    """Parks URLs whose host (or every URL, in global scope) answered 429.

    Every probe waits on the gate before it is dispatched, so one rate-limiting
    server delays only the URLs sharing its cooldown key. Deadlines are only
    ever extended; all reads and writes go through one lock.
    """

    def __init__(
        self,
        cooldown: float,
        scope: Literal["host", "global"] = "host",
        max_cooldown: float | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._cooldown = cooldown
        self._scope = scope
        self._max_cooldown = max_cooldown
        self._clock = clock
        self._sleep = sleep
        self._deadlines: dict[str, float] = {}
        self._lock = asyncio.Lock()

    def key_for(self, url: str) -> str:
        if self._scope == "global":
            return GLOBAL_KEY
        try:
            host = urlsplit(url).hostname
        except ValueError:
            host = None
        return host or GLOBAL_KEY

    def cooldown_for(self, retry_after: float | None) -> float:
        """Cooldown to apply: the configured minimum, stretched by Retry-After."""
        delay = self._cooldown
        if retry_after is not None and retry_after > delay:
            delay = retry_after
        if self._max_cooldown is not None:
            delay = min(delay, self._max_cooldown)
        return delay

    async def defer(self, url: str, retry_after: float | None = None) -> float:
        """Park the cooldown key of ``url``.

        Returns:
            The number of seconds until the key reopens.
        """
        key = self.key_for(url)
        delay = self.cooldown_for(retry_after)
        async with self._lock:
            now = self._clock()
            deadline = max(self._deadlines.get(key, now), now + delay)
            self._deadlines[key] = deadline
        logger.info(f"Rate limited by {key}; parked for {deadline - now:.1f}s")
        return deadline - now

    async def remaining(self, url: str) -> float:
        key = self.key_for(url)
        async with self._lock:
            deadline = self._deadlines.get(key)
            if deadline is None:
                return 0.0
            left = deadline - self._clock()
            if left <= 0:
                del self._deadlines[key]
                return 0.0
            return left

    async def wait(self, url: str) -> None:
        """Block until the cooldown key of ``url`` is open.

        The deadline is re-read after every sleep since another probe may have
        extended it meanwhile.
        """
        while True:
            left = await self.remaining(url)
            if left <= 0:
                return
            await self._sleep(left)
