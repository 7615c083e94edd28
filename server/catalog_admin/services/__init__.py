"""Services module for business logic."""
from __future__ import annotations

from .catalog_screen import CatalogScreen, build_catalog_screen, create_catalog_screen
from .image_upload import ImageUploader, StorageImageUploader
from .mutation_controller import MutationController
from .notifier import Notification, NotificationKind, Notifier
from .product_repository import ProductRepository, SqlProductTable
from .product_table import PostgrestProductTable, ProductTable
from .query_controller import QueryController

__all__ = [
    "CatalogScreen",
    "build_catalog_screen",
    "create_catalog_screen",
    "ImageUploader",
    "StorageImageUploader",
    "MutationController",
    "Notification",
    "NotificationKind",
    "Notifier",
    "ProductRepository",
    "SqlProductTable",
    "PostgrestProductTable",
    "ProductTable",
    "QueryController",
]
