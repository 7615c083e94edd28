"""Public schema exports."""

from .catalog import CatalogStateResponse, ImageUrlRequest, PaginationResponse, SearchRequest
from .product import (
    ProductDraft,
    ProductDraftUpdate,
    ProductPage,
    ProductRecord,
    ProductWrite,
    derive_slug,
    generate_sku,
)

__all__ = [
    "CatalogStateResponse",
    "ImageUrlRequest",
    "PaginationResponse",
    "SearchRequest",
    "ProductDraft",
    "ProductDraftUpdate",
    "ProductPage",
    "ProductRecord",
    "ProductWrite",
    "derive_slug",
    "generate_sku",
]
