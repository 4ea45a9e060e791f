from .provider import SleuthProvider

__all__ = ["SleuthProvider"]
