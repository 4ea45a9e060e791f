"""Rating domain model."""

from sleuther.domain.rating.model.aspect import (
    QUALITY_RATING_ASPECT,
    QualityRatingAspect,
    RatingEvidence,
)
from sleuther.domain.rating.model.tables import (
    DEFAULT_TABLES,
    FORMAT_LEVELS,
    OPEN_FORMATS,
    OPEN_LICENSES,
    RatingTables,
)
from sleuther.domain.rating.model.value import MAX_STARS, DistributionRating

__all__ = [
    "DEFAULT_TABLES",
    "FORMAT_LEVELS",
    "MAX_STARS",
    "OPEN_FORMATS",
    "OPEN_LICENSES",
    "QUALITY_RATING_ASPECT",
    "DistributionRating",
    "QualityRatingAspect",
    "RatingEvidence",
    "RatingTables",
]
