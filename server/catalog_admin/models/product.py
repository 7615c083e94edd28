"""Product model definition."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text, Uuid, func, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ProductStatus(str, Enum):
    """Publication lifecycle of a product."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    DISCONTINUED = "discontinued"


class ProductVisibility(str, Enum):
    """Where a product is shown in the storefront."""

    VISIBLE = "visible"
    HIDDEN = "hidden"
    SEARCH_ONLY = "search_only"
    CATALOG_ONLY = "catalog_only"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """Represents a catalog product managed from the admin screen."""

    __tablename__ = "products"

    product_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    sku: Mapped[str] = mapped_column(Text, nullable=False)
    upc: Mapped[str | None] = mapped_column(Text, nullable=True)
    ean: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=ProductStatus.DRAFT.value)
    visibility: Mapped[str] = mapped_column(String(32), nullable=False, default=ProductVisibility.VISIBLE.value)
    is_digital: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    main_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    __table_args__ = (
        Index("uq_products_sku_lower", func.lower(sku), unique=True),
        Index("ix_products_created_at", created_at),
    )
