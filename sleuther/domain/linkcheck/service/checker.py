"""LinkChecker - drives each URL's state machine to a terminal state."""

import asyncio
import logging
import random
from collections.abc import Iterable

from sleuther.config import LinkCheckConfig
from sleuther.domain.linkcheck.model.state import UrlCheck, UrlState
from sleuther.domain.linkcheck.model.value import (
    LinkCheckResult,
    ProbeClass,
    classify_status,
)
from sleuther.domain.linkcheck.port.prober import Prober
from sleuther.domain.linkcheck.service.gate import RateLimitGate
from sleuther.domain.shared.error import ProbeFailedError
from sleuther.domain.shared.timing import Sleep

logger = logging.getLogger(__name__)


class LinkChecker:
    """Probes URLs with retry/backoff for errors and cooldown for 429s.

    Errors are retried with exponential backoff until ``max_attempts`` probes
    have been charged; 404/410 are terminal at once; 429 parks the URL on the
    shared ``RateLimitGate`` without touching the retry budget.

    At most ``max_concurrency`` probes are in flight at once across every
    record sharing this checker. A slot is held only while a probe runs, never
    during backoff or cooldown waits.
    """

    def __init__(
        self,
        prober: Prober,
        config: LinkCheckConfig,
        gate: RateLimitGate | None = None,
        sleep: Sleep = asyncio.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._prober = prober
        self._config = config
        self._gate = gate or RateLimitGate(
            cooldown=config.rate_limit_cooldown,
            scope=config.rate_limit_scope,
            max_cooldown=config.max_cooldown,
        )
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._slots = asyncio.Semaphore(config.max_concurrency)

    @property
    def gate(self) -> RateLimitGate:
        return self._gate

    def backoff(self, attempts: int) -> float:
        """Delay before the retry that follows ``attempts`` charged probes."""
        cfg = self._config
        delay = min(cfg.backoff_base * cfg.backoff_factor ** (attempts - 1), cfg.backoff_max)
        if cfg.backoff_jitter > 0:
            delay += self._rng.uniform(0, cfg.backoff_jitter)
        return delay

    async def check(self, url: str) -> LinkCheckResult:
        """Probe ``url`` until it reaches a terminal state."""
        check = UrlCheck(
            url=url,
            max_attempts=self._config.max_attempts,
            max_deferrals=self._config.max_deferrals,
        )
        while not check.terminal:
            await self._gate.wait(url)
            outcome, status_code, retry_after, error = await self._probe_once(check)
            state = check.record(outcome, status_code=status_code, error=error)

            if state is UrlState.BACKOFF_WAIT:
                delay = self.backoff(check.attempts)
                logger.debug(
                    f"{url} failed ({status_code or error}), retrying in {delay:.1f}s "
                    f"(attempt {check.attempts}/{check.max_attempts})"
                )
                await self._sleep(delay)
            elif state is UrlState.DEFERRED_WAIT:
                await self._gate.defer(url, retry_after)

        result = check.result()
        logger.debug(f"{url} -> {result.status} after {result.attempts} attempt(s)")
        return result

    async def check_all(self, urls: Iterable[str]) -> dict[str, LinkCheckResult]:
        """Check every URL concurrently; returns once all are terminal.

        The mapping preserves the order of ``urls``.
        """
        ordered = list(dict.fromkeys(urls))
        results = await asyncio.gather(*(self.check(url) for url in ordered))
        return dict(zip(ordered, results))

    async def _probe_once(
        self, check: UrlCheck
    ) -> tuple[ProbeClass, int | None, float | None, str | None]:
        async with self._slots:
            check.begin_probe()
            try:
                response = await asyncio.wait_for(
                    self._prober.probe(check.url), timeout=self._config.timeout
                )
            except ProbeFailedError as e:
                return ProbeClass.ERROR, None, None, e.reason
            except TimeoutError:
                return ProbeClass.ERROR, None, None, "timed out"
            except Exception as e:
                # A broken prober fails this URL, never its siblings
                logger.exception(f"Unexpected failure probing {check.url}: {e}")
                return ProbeClass.ERROR, None, None, f"{type(e).__name__}: {e}"
        return (
            classify_status(response.status_code),
            response.status_code,
            response.retry_after,
            None,
        )
