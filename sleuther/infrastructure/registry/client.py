"""HTTP adapter for the RecordSource and RegistrySink ports."""

import logging
from collections.abc import AsyncGenerator, Mapping
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from sleuther.config import RegistryConfig
from sleuther.domain.record.model.aggregate import Record
from sleuther.domain.record.model.aspect import DISTRIBUTIONS_ASPECT
from sleuther.domain.record.port.sink import RegistrySink
from sleuther.domain.record.port.source import RecordSource
from sleuther.domain.shared.error import (
    ConflictError,
    RegistryRejectedError,
    RegistryUnavailableError,
)

logger = logging.getLogger(__name__)

_CONFLICT_STATUSES = frozenset({409, 412})


def registry_headers(config: RegistryConfig) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"
    if config.tenant_id:
        headers["X-Magda-Tenant-Id"] = config.tenant_id
    return headers


class HttpRegistryClient(RecordSource, RegistrySink):
    """Reads dataset records from, and patches aspects into, the registry API.

    Records are crawled page by page with the distributions dereferenced
    inline. Derived aspects are written with one JSON Patch request per
    record, which the registry applies atomically.
    """

    def __init__(self, client: httpx.AsyncClient, config: RegistryConfig) -> None:
        self._client = client
        self._base_url = config.base_url.rstrip("/")
        self._page_size = config.page_size

    async def iter_records(self) -> AsyncGenerator[Record, None]:
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {
                "aspect": DISTRIBUTIONS_ASPECT,
                "dereference": "true",
                "limit": self._page_size,
            }
            if page_token:
                params["pageToken"] = page_token

            body = await self._get_json(f"{self._base_url}/records", params)
            items = body.get("records") or []
            logger.debug(f"Fetched page of {len(items)} records (pageToken={page_token})")

            for item in items:
                record = self._parse(item)
                if record is not None:
                    yield record

            page_token = body.get("nextPageToken")
            if not items or not page_token or body.get("hasMore") is False:
                return

    async def get_record(self, record_id: str) -> Record | None:
        url = f"{self._base_url}/records/{quote(record_id, safe='')}"
        params = {"aspect": DISTRIBUTIONS_ASPECT, "dereference": "true"}
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise RegistryUnavailableError(f"Registry request failed: {e}") from e
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        return self._parse(response.json())

    async def put_aspects(
        self,
        record_id: str,
        aspects: Mapping[str, dict[str, Any]],
        revision: str | None = None,
    ) -> None:
        url = f"{self._base_url}/records/{quote(record_id, safe='')}"
        patch = [
            {"op": "add", "path": f"/aspects/{_escape_pointer(name)}", "value": value}
            for name, value in aspects.items()
        ]
        headers = {"Content-Type": "application/json-patch+json"}
        if revision is not None:
            headers["If-Match"] = revision

        try:
            response = await self._client.patch(url, json=patch, headers=headers)
        except httpx.HTTPError as e:
            raise RegistryUnavailableError(f"Registry request failed: {e}") from e
        self._raise_for_status(response)

    async def _get_json(self, url: str, params: Mapping[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise RegistryUnavailableError(f"Registry request failed: {e}") from e
        self._raise_for_status(response)
        return response.json()

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        detail = f"{response.request.method} {response.request.url} -> {status}"
        if status in _CONFLICT_STATUSES:
            raise ConflictError(f"Revision conflict: {detail}")
        if status == 429 or status >= 500:
            raise RegistryUnavailableError(f"Registry unavailable: {detail}")
        raise RegistryRejectedError(f"Registry rejected request: {detail}", status_code=status)

    @staticmethod
    def _parse(item: Any) -> Record | None:
        try:
            return Record.model_validate(item)
        except PydanticValidationError as e:
            logger.warning(f"Skipping unreadable registry record: {e.error_count()} error(s)")
            return None


def _escape_pointer(token: str) -> str:
    """Escape a JSON Pointer reference token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")
