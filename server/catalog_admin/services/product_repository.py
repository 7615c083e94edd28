"""Product repository and the SQL-backed table adapter."""
from __future__ import annotations

import logging
from typing import Callable, Sequence, TypeVar
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, sessionmaker

from catalog_admin.core.db import session_scope
from catalog_admin.core.exceptions import RecordNotFoundError, RemoteStoreError
from catalog_admin.models.product import Product
from catalog_admin.schemas.product import ProductRecord, ProductWrite

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProductRepository:
    """Handles database operations for Product entities."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with a SQLAlchemy session.

        Args:
            session: Active database session for executing queries
        """
        self._session = session

    def _filtered(self, name_filter: str) -> Query[Product]:
        query = self._session.query(Product)
        if name_filter:
            # Case-insensitive substring match; % and _ in the filter are literal
            query = query.filter(Product.name.icontains(name_filter, autoescape=True))
        return query

    def get_by_id(self, product_id: UUID) -> Product | None:
        """Fetch a product by its identifier.

        Args:
            product_id: Store identifier

        Returns:
            Product instance if found, None otherwise
        """
        return self._session.get(Product, product_id)

    def count_by_name(self, name_filter: str) -> int:
        """Return the number of products whose name contains the filter.

        Args:
            name_filter: Substring to match (empty string matches all)

        Returns:
            Matching product count
        """
        return self._filtered(name_filter).count()

    def list_by_name(self, name_filter: str, *, offset: int, limit: int) -> Sequence[Product]:
        """Fetch one window of matching products, newest first.

        Args:
            name_filter: Substring to match (empty string matches all)
            offset: Number of products to skip
            limit: Maximum number of products to return

        Returns:
            Sequence of Product instances
        """
        return (
            self._filtered(name_filter)
            .order_by(Product.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def create(self, record: ProductWrite) -> Product:
        """Create a new product.

        Args:
            record: Normalized product payload

        Returns:
            Created Product instance

        Raises:
            IntegrityError: If SKU already exists (case-insensitive)
        """
        db_product = Product(**self._columns(record))
        self._session.add(db_product)
        self._session.commit()
        self._session.refresh(db_product)
        return db_product

    def update(self, product_id: UUID, record: ProductWrite) -> Product | None:
        """Replace the editable fields of a product.

        Args:
            product_id: Store identifier
            record: Normalized product payload

        Returns:
            Updated Product instance if found, None otherwise
        """
        db_product = self.get_by_id(product_id)
        if db_product is None:
            return None

        for column, value in self._columns(record).items():
            setattr(db_product, column, value)

        self._session.commit()
        self._session.refresh(db_product)
        return db_product

    def delete(self, product_id: UUID) -> bool:
        """Delete a product by identifier.

        Args:
            product_id: Store identifier

        Returns:
            True if product was deleted, False if not found
        """
        db_product = self.get_by_id(product_id)
        if db_product is None:
            return False

        self._session.delete(db_product)
        self._session.commit()
        return True

    @staticmethod
    def _columns(record: ProductWrite) -> dict:
        values = record.model_dump()
        values["status"] = record.status.value
        values["visibility"] = record.visibility.value
        return values


class SqlProductTable:
    """ProductTable implemented over a SQL database through ProductRepository.

    Each call is one unit of work run in the threadpool, so blocking driver
    I/O never holds the event loop.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def _run(self, action: str, work: Callable[[ProductRepository], T]) -> T:
        def unit_of_work() -> T:
            with session_scope(self._session_factory) as session:
                return work(ProductRepository(session))

        try:
            return await run_in_threadpool(unit_of_work)
        except SQLAlchemyError as e:
            logger.error(f"{action} failed: {e}")
            raise RemoteStoreError(f"{action} failed: {e}") from e

    async def count(self, name_filter: str) -> int:
        return await self._run("Count query", lambda repo: repo.count_by_name(name_filter))

    async def page(self, name_filter: str, *, offset: int, limit: int) -> list[ProductRecord]:
        def fetch(repo: ProductRepository) -> list[ProductRecord]:
            rows = repo.list_by_name(name_filter, offset=offset, limit=limit)
            return [ProductRecord.model_validate(row) for row in rows]

        return await self._run("Page query", fetch)

    async def insert(self, record: ProductWrite) -> ProductRecord:
        return await self._run(
            f"Insert of SKU {record.sku}",
            lambda repo: ProductRecord.model_validate(repo.create(record)),
        )

    async def update(self, product_id: UUID, record: ProductWrite) -> None:
        updated = await self._run(
            f"Update of product {product_id}",
            lambda repo: repo.update(product_id, record) is not None,
        )
        if not updated:
            raise RecordNotFoundError(product_id)

    async def delete(self, product_id: UUID) -> None:
        deleted = await self._run(f"Delete of product {product_id}", lambda repo: repo.delete(product_id))
        if not deleted:
            raise RecordNotFoundError(product_id)
