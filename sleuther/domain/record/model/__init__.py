"""Record domain model."""

from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.record.model.aspect import (
    DISTRIBUTION_STRINGS_ASPECT,
    DISTRIBUTIONS_ASPECT,
    DatasetDistributions,
    Distribution,
    DistributionStrings,
    decode_aspect,
)

__all__ = [
    "DISTRIBUTIONS_ASPECT",
    "DISTRIBUTION_STRINGS_ASPECT",
    "DatasetDistributions",
    "Distribution",
    "DistributionStrings",
    "Record",
    "decode_aspect",
]
