import json
from typing import Any

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class AspectPayload(ValueObject):
    """A value object that is persisted as a registry aspect.

    Payloads use the registry's camelCase field names on the wire and are
    serialised canonically so identical inputs produce identical bytes.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def canonical_json(self) -> str:
        return canonical_json(self.to_payload())


def canonical_json(payload: Any) -> str:
    """Serialise a JSON-compatible value with sorted keys and no whitespace."""
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
