from .provider import RatingProvider

__all__ = ["RatingProvider"]
