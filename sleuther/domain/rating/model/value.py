"""Rating value objects."""

from sleuther.domain.shared.model.value import ValueObject

MAX_STARS = 5


class DistributionRating(ValueObject):
    """Star count of one distribution and the evidence behind it."""

    distribution_id: str | None = None
    distribution_name: str | None = None
    stars: int
    license: str | None = None
    format: str | None = None
    matched_license: str | None = None
    matched_format: str | None = None
