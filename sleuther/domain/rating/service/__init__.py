from .rating import RatingEngine

__all__ = ["RatingEngine"]
