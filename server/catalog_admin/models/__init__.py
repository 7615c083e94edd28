"""ORM models exposed for external modules."""
from .base import Base
from .product import Product, ProductStatus, ProductVisibility

__all__ = [
    "Base",
    "Product",
    "ProductStatus",
    "ProductVisibility",
]
