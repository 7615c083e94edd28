"""Errors raised by the catalog collaborators and controllers."""
from __future__ import annotations

from typing import Any


class CatalogError(Exception):
    """Base exception for every failure the controllers report to the operator."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RemoteStoreError(CatalogError):
    """Raised when a count, fetch, insert, update or delete call fails."""

    def __init__(
        self,
        message: str = "Remote store operation failed",
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, details)


class RecordNotFoundError(RemoteStoreError):
    """Raised when an update or delete targets an identifier the store does not hold."""

    def __init__(self, product_id: Any) -> None:
        super().__init__(
            f"Product not found: {product_id}",
            status_code=404,
            details={"product_id": str(product_id)},
        )
        self.product_id = product_id


class UploadError(CatalogError):
    """Raised when an image upload attempt fails."""


class DraftValidationError(CatalogError):
    """Raised when a draft does not satisfy the write rules."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors), details={"errors": errors})
