"""Wiring of the collaborators and controllers behind one admin screen."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from sqlalchemy import Engine

from catalog_admin.core.config import Settings
from catalog_admin.core.db import build_engine, build_session_factory
from catalog_admin.models.base import Base
from catalog_admin.services.image_upload import ImageUploader, StorageImageUploader
from catalog_admin.services.mutation_controller import MutationController
from catalog_admin.services.notifier import Notifier
from catalog_admin.services.product_repository import SqlProductTable
from catalog_admin.services.product_table import PostgrestProductTable, ProductTable
from catalog_admin.services.query_controller import QueryController

logger = logging.getLogger(__name__)


@dataclass
class CatalogScreen:
    """State owners for the product admin screen."""

    table: ProductTable
    notifier: Notifier
    query: QueryController
    mutation: MutationController


def create_catalog_screen(
    table: ProductTable,
    uploader: ImageUploader | None = None,
    *,
    page_size: int = 9,
) -> CatalogScreen:
    notifier = Notifier()
    query = QueryController(table, notifier, page_size=page_size)
    mutation = MutationController(table, query, notifier, uploader)
    return CatalogScreen(table=table, notifier=notifier, query=query, mutation=mutation)


def create_product_table(settings: Settings, client: httpx.AsyncClient) -> tuple[ProductTable, Engine | None]:
    """Build the table client selected by ``settings.table_backend``.

    Returns:
        The table and, for the SQL backend, the engine the caller must dispose
    """
    if settings.table_backend == "sql":
        engine = build_engine(settings.database_url)
        Base.metadata.create_all(engine)
        logger.info("Using SQL product table backend")
        return SqlProductTable(build_session_factory(engine)), engine

    logger.info(f"Using REST product table backend at {settings.rest_url}/{settings.products_table}")
    return PostgrestProductTable(client, settings.rest_url, settings.products_table), None


def build_catalog_screen(settings: Settings, client: httpx.AsyncClient) -> tuple[CatalogScreen, Engine | None]:
    """Assemble a screen from application settings."""
    table, engine = create_product_table(settings, client)
    uploader = StorageImageUploader(
        client,
        settings.storage_url,
        settings.storage_bucket,
        max_size_mb=settings.max_image_size_mb,
    )
    return create_catalog_screen(table, uploader, page_size=settings.page_size), engine
