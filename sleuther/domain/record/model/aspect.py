"""Tagged aspect schemas.

Each aspect a sleuther reads is decoded through the schema registered for its
name. Missing or blank fields decode to ``None``; a payload that contradicts
its schema raises ``MalformedAspectError``.
"""

from typing import Any

from pydantic import ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from sleuther.domain.shared.error import MalformedAspectError
from sleuther.domain.shared.model.value import ValueObject

DISTRIBUTIONS_ASPECT = "dataset-distributions"
DISTRIBUTION_STRINGS_ASPECT = "dcat-distribution-strings"


class AspectSchema(ValueObject):
    """Base for decoded aspect payloads. Unknown fields are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class DistributionStrings(AspectSchema):
    """The free-text DCAT fields of one distribution."""

    title: str | None = None
    access_url: str | None = Field(default=None, alias="accessURL")
    download_url: str | None = Field(default=None, alias="downloadURL")
    license: str | None = None
    format: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class Distribution(AspectSchema):
    """One downloadable representation of a dataset."""

    id: str | None = None
    name: str | None = None
    aspects: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _numeric_id(cls, value: Any) -> Any:
        # Some registries number distributions
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("aspects", mode="before")
    @classmethod
    def _null_aspects(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def strings(self) -> DistributionStrings:
        """Decoded ``dcat-distribution-strings``; empty when the aspect is absent."""
        decoded = decode_aspect(
            DISTRIBUTION_STRINGS_ASPECT, self.aspects.get(DISTRIBUTION_STRINGS_ASPECT)
        )
        return decoded if decoded is not None else DistributionStrings()


class DatasetDistributions(AspectSchema):
    """The ordered distributions of a dataset record."""

    distributions: list[Distribution] = Field(default_factory=list)

    @field_validator("distributions", mode="before")
    @classmethod
    def _null_distributions(cls, value: Any) -> Any:
        return [] if value is None else value


ASPECT_SCHEMAS: dict[str, type[AspectSchema]] = {
    DISTRIBUTIONS_ASPECT: DatasetDistributions,
    DISTRIBUTION_STRINGS_ASPECT: DistributionStrings,
}


def decode_aspect(name: str, payload: Any) -> AspectSchema | None:
    """Decode an aspect payload using the schema registered for ``name``.

    Returns:
        The decoded schema instance, or ``None`` when the payload is absent.

    Raises:
        KeyError: If no schema is registered for ``name``.
        MalformedAspectError: If the payload does not match the schema.
    """
    schema = ASPECT_SCHEMAS[name]
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise MalformedAspectError(name, f"expected an object, got {type(payload).__name__}")
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedAspectError(name, _summarise(e)) from e


def _summarise(error: PydanticValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(p) for p in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)
