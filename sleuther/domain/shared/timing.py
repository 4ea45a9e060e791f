"""Clock and sleep signatures, injectable so waits can be faked in tests."""

from collections.abc import Awaitable, Callable

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]
