"""Pydantic schemas describing the admin screen payloads."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from catalog_admin.schemas.product import ProductDraft, ProductRecord


class SearchRequest(BaseModel):
    """New search box contents."""

    text: str = Field(default="", description="Case-insensitive substring matched against product names")


class ImageUrlRequest(BaseModel):
    """URL of an image uploaded outside this service."""

    url: str = Field(min_length=1)


class PaginationResponse(BaseModel):
    page: int = Field(ge=1, description="Current page number (1-indexed)")
    total_pages: int = Field(ge=1)
    total_count: int = Field(ge=0, description="Total number of products matching the search")
    has_prev: bool
    has_next: bool
    show_controls: bool


class NotificationResponse(BaseModel):
    kind: Literal["success", "error"]
    message: str
    created_at: datetime


class CatalogStateResponse(BaseModel):
    """Everything the presentation layer needs to render the screen."""

    state: Literal["idle", "loading", "ready", "error"]
    error: str | None = Field(default=None, description="Reason of the last failed refresh")
    search_text: str
    pagination: PaginationResponse
    products: list[ProductRecord]
    empty_message: str | None = None
    draft: ProductDraft
    editing_product_id: UUID | None = None
    notifications: list[NotificationResponse] = Field(default_factory=list)
