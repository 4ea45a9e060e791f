"""Record aggregate as delivered by the registry."""

from typing import Any, cast

from pydantic import ConfigDict, Field

from sleuther.domain.record.model.aspect import (
    DISTRIBUTIONS_ASPECT,
    DatasetDistributions,
    Distribution,
    decode_aspect,
)
from sleuther.domain.shared.model.value import ValueObject


class Record(ValueObject):
    """A registry record: an identity plus named aspects.

    The sleuther only reads aspects and appends derived ones; ``revision`` is
    the registry's opaque revision token, echoed back on write when known.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = ""
    aspects: dict[str, Any] = Field(default_factory=dict)
    revision: str | None = None

    def distributions(self) -> list[Distribution]:
        """Decoded distributions, in registry order.

        Raises:
            MalformedAspectError: If ``dataset-distributions`` is malformed.
        """
        decoded = decode_aspect(DISTRIBUTIONS_ASPECT, self.aspects.get(DISTRIBUTIONS_ASPECT))
        if decoded is None:
            return []
        return cast(DatasetDistributions, decoded).distributions
