"""Remote table contract and its REST (PostgREST) implementation."""
from __future__ import annotations

import logging
from typing import Any, Protocol
from uuid import UUID

import httpx
from pydantic import ValidationError

from catalog_admin.core.exceptions import RecordNotFoundError, RemoteStoreError
from catalog_admin.schemas.product import ProductRecord, ProductWrite

logger = logging.getLogger(__name__)


class ProductTable(Protocol):
    """Query builder over the remote products table.

    Every call is atomic; failures raise RemoteStoreError.
    """

    async def count(self, name_filter: str) -> int: ...

    async def page(self, name_filter: str, *, offset: int, limit: int) -> list[ProductRecord]: ...

    async def insert(self, record: ProductWrite) -> ProductRecord: ...

    async def update(self, product_id: UUID, record: ProductWrite) -> None: ...

    async def delete(self, product_id: UUID) -> None: ...


def escape_like(text: str) -> str:
    """Backslash-escape LIKE metacharacters so ``%`` and ``_`` match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def parse_content_range_total(header: str | None) -> int:
    """Extract the total from a ``Content-Range`` header such as ``0-8/42`` or ``*/0``."""
    if not header or "/" not in header:
        raise RemoteStoreError("Count response is missing Content-Range")
    total = header.rsplit("/", 1)[1]
    if not total.isdigit():
        raise RemoteStoreError(f"Count is unavailable in Content-Range: {header}")
    return int(total)


class PostgrestProductTable:
    """ProductTable backed by a hosted PostgREST endpoint."""

    def __init__(self, client: httpx.AsyncClient, rest_url: str, table: str = "products") -> None:
        """Initialize the table client.

        Args:
            client: Authenticated async HTTP client
            rest_url: Base URL of the REST API (``.../rest/v1``)
            table: Remote table name
        """
        self._client = client
        self._url = f"{rest_url.rstrip('/')}/{table}"

    @staticmethod
    def _name_params(name_filter: str) -> dict[str, str]:
        if not name_filter:
            return {}
        return {"name": f"ilike.*{escape_like(name_filter)}*"}

    async def _send(
        self,
        method: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, self._url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"{method} {self._url} failed: {e}")
            raise RemoteStoreError(f"Remote store unreachable: {e}") from e

        if response.is_error:
            message = response.reason_phrase or "Remote store error"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = body["message"]
            except ValueError:
                pass
            logger.warning(f"{method} {self._url} returned {response.status_code}: {message}")
            raise RemoteStoreError(message, status_code=response.status_code)
        return response

    @staticmethod
    def _records(response: httpx.Response) -> list[ProductRecord]:
        try:
            rows = response.json()
            return [ProductRecord.model_validate(row) for row in rows]
        except (ValueError, TypeError, ValidationError) as e:
            raise RemoteStoreError(f"Malformed product payload: {e}") from e

    async def count(self, name_filter: str) -> int:
        params = {"select": "product_id", **self._name_params(name_filter)}
        response = await self._send("HEAD", params=params, headers={"Prefer": "count=exact"})
        return parse_content_range_total(response.headers.get("content-range"))

    async def page(self, name_filter: str, *, offset: int, limit: int) -> list[ProductRecord]:
        params = {
            "select": "*",
            **self._name_params(name_filter),
            "order": "created_at.desc",
            "offset": offset,
            "limit": limit,
        }
        response = await self._send("GET", params=params)
        return self._records(response)

    async def insert(self, record: ProductWrite) -> ProductRecord:
        response = await self._send(
            "POST",
            json=[record.model_dump(mode="json")],
            headers={"Prefer": "return=representation"},
        )
        records = self._records(response)
        if not records:
            raise RemoteStoreError("Insert returned no representation")
        return records[0]

    async def update(self, product_id: UUID, record: ProductWrite) -> None:
        response = await self._send(
            "PATCH",
            params={"product_id": f"eq.{product_id}"},
            json=record.model_dump(mode="json"),
            headers={"Prefer": "return=representation"},
        )
        if not self._records(response):
            raise RecordNotFoundError(product_id)

    async def delete(self, product_id: UUID) -> None:
        response = await self._send(
            "DELETE",
            params={"product_id": f"eq.{product_id}"},
            headers={"Prefer": "return=representation"},
        )
        if not self._records(response):
            raise RecordNotFoundError(product_id)
