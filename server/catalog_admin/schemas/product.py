"""Pydantic schemas for product records, drafts and write payloads."""
from __future__ import annotations

import random
import re
import string
import time
from datetime import datetime
from decimal import Decimal
from typing import Callable
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from catalog_admin.core.exceptions import DraftValidationError
from catalog_admin.models.product import ProductStatus, ProductVisibility

SKU_PREFIX = "SKU"
_SKU_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")

OPTIONAL_TEXT_FIELDS = ("upc", "ean", "description", "short_description", "main_image_url")


def derive_slug(name: str) -> str:
    """Lowercase the name and collapse every non-alphanumeric run into one hyphen.

    >>> derive_slug("Red Shoes!!")
    'red-shoes'
    """
    return _SLUG_SEPARATOR_RE.sub("-", name.lower()).strip("-")


def generate_sku(prefix: str = SKU_PREFIX) -> str:
    """Build a best-effort unique SKU from the current epoch millis and a random suffix.

    No collision check is made against the store.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    suffix = "".join(random.choices(_SKU_SUFFIX_ALPHABET, k=5))
    return f"{prefix}-{timestamp_ms}-{suffix}".upper()


def _blank_to_none(value: str) -> str | None:
    value = value.strip()
    return value or None


class ProductRecord(BaseModel):
    """A product as returned by the remote table."""

    product_id: UUID = Field(description="Store-assigned identifier")
    name: str
    slug: str | None = None
    sku: str | None = None
    upc: str | None = None
    ean: str | None = None
    description: str | None = None
    short_description: str | None = None
    base_price: Decimal | None = None
    stock_quantity: int | None = None
    is_in_stock: bool | None = None
    status: ProductStatus | None = None
    visibility: ProductVisibility | None = None
    is_digital: bool | None = None
    main_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class ProductDraft(BaseModel):
    """In-progress form state for creating or editing a product.

    Derived fields (slug, stock flag) are not part of the draft and are
    rejected if supplied.
    """

    name: str = ""
    sku: str = ""
    upc: str = ""
    ean: str = ""
    description: str = ""
    short_description: str = ""
    base_price: Decimal = Decimal("0")
    stock_quantity: int = 0
    status: ProductStatus = ProductStatus.DRAFT
    visibility: ProductVisibility = ProductVisibility.VISIBLE
    is_digital: bool = False
    main_image_url: str = ""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @classmethod
    def from_record(cls, product: ProductRecord) -> ProductDraft:
        """Seed a draft from a loaded product, filling missing values with form defaults."""
        return cls(
            name=product.name,
            sku=product.sku or "",
            upc=product.upc or "",
            ean=product.ean or "",
            description=product.description or "",
            short_description=product.short_description or "",
            base_price=product.base_price or Decimal("0"),
            stock_quantity=product.stock_quantity or 0,
            status=product.status or ProductStatus.DRAFT,
            visibility=product.visibility or ProductVisibility.VISIBLE,
            is_digital=product.is_digital or False,
            main_image_url=product.main_image_url or "",
        )

    def validation_errors(self) -> list[str]:
        errors: list[str] = []
        if not self.name.strip():
            errors.append("Product name is required")
        if self.base_price < 0:
            errors.append("Base price cannot be negative")
        if self.stock_quantity < 0:
            errors.append("Stock quantity cannot be negative")
        return errors


class ProductDraftUpdate(BaseModel):
    """Partial edit applied to the active draft (all fields optional)."""

    name: str | None = None
    sku: str | None = None
    upc: str | None = None
    ean: str | None = None
    description: str | None = None
    short_description: str | None = None
    base_price: Decimal | None = None
    stock_quantity: int | None = None
    status: ProductStatus | None = None
    visibility: ProductVisibility | None = None
    is_digital: bool | None = None
    main_image_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class ProductWrite(BaseModel):
    """Normalized payload sent to the store on insert or update."""

    name: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    upc: str | None = None
    ean: str | None = None
    description: str | None = None
    short_description: str | None = None
    base_price: Decimal = Field(ge=0)
    stock_quantity: int = Field(ge=0)
    status: ProductStatus = ProductStatus.DRAFT
    visibility: ProductVisibility = ProductVisibility.VISIBLE
    is_digital: bool = False
    main_image_url: str | None = None
    slug: str
    is_in_stock: bool

    @field_serializer("base_price", when_used="json")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

    @classmethod
    def from_draft(
        cls,
        draft: ProductDraft,
        *,
        sku_factory: Callable[[], str] = generate_sku,
    ) -> ProductWrite:
        """Validate and normalize a draft, computing the derived fields.

        Args:
            draft: Operator's form state
            sku_factory: Called when the draft carries no SKU

        Returns:
            ProductWrite ready for transmission

        Raises:
            DraftValidationError: If the draft breaks a write rule
        """
        errors = draft.validation_errors()
        if errors:
            raise DraftValidationError(errors)

        name = draft.name.strip()
        optional = {field: _blank_to_none(getattr(draft, field)) for field in OPTIONAL_TEXT_FIELDS}
        return cls(
            name=name,
            sku=draft.sku.strip() or sku_factory(),
            base_price=draft.base_price,
            stock_quantity=draft.stock_quantity,
            status=draft.status,
            visibility=draft.visibility,
            is_digital=draft.is_digital,
            slug=derive_slug(name),
            is_in_stock=draft.stock_quantity > 0,
            **optional,
        )


class ProductPage(BaseModel):
    """One page window of products plus the total matching count."""

    items: list[ProductRecord] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
