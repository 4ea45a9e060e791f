from .checker import LinkChecker
from .gate import RateLimitGate

__all__ = ["LinkChecker", "RateLimitGate"]
