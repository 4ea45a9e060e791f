import pytest

from sleuther.config import LinkCheckConfig
from tests.fakes import FakeClock
from tests.generators import RecordFactory


@pytest.fixture
def factory() -> RecordFactory:
    return RecordFactory(seed=1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def link_config() -> LinkCheckConfig:
    """Deterministic checker settings: no jitter, three attempts, 60s cooldown."""
    return LinkCheckConfig(
        max_attempts=3,
        backoff_base=1.0,
        backoff_factor=2.0,
        backoff_max=30.0,
        backoff_jitter=0.0,
        timeout=5.0,
        max_concurrency=4,
        rate_limit_cooldown=60.0,
        rate_limit_scope="host",
        max_cooldown=600.0,
        max_deferrals=5,
    )
