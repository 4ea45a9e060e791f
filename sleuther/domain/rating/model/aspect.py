"""The ``dataset-linked-data-rating`` derived aspect."""

from pydantic import Field

from sleuther.domain.rating.model.value import MAX_STARS
from sleuther.domain.shared.model.value import AspectPayload

QUALITY_RATING_ASPECT = "dataset-linked-data-rating"


class RatingEvidence(AspectPayload):
    """A distribution that reached the record's star count."""

    distribution_id: str | None = Field(default=None, alias="distributionId")
    distribution_name: str | None = Field(default=None, alias="distributionName")
    stars: int
    license: str | None = None
    format: str | None = None
    matched_license: str | None = Field(default=None, alias="matchedLicense")
    matched_format: str | None = Field(default=None, alias="matchedFormat")


class QualityRatingAspect(AspectPayload):
    stars: int = Field(ge=0, le=MAX_STARS)
    distribution_id: str | None = Field(default=None, alias="distributionId")
    evidence: list[RatingEvidence] = Field(default_factory=list)
