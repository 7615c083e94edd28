"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import asyncio
import os
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")

from catalog_admin.core.exceptions import RecordNotFoundError, RemoteStoreError  # noqa: E402
from catalog_admin.models.base import Base  # noqa: E402
from catalog_admin.schemas.product import ProductRecord, ProductWrite  # noqa: E402
from catalog_admin.services.catalog_screen import CatalogScreen, create_catalog_screen  # noqa: E402

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")


class FakeProductTable:
    """In-memory ProductTable with failure injection and per-search gates."""

    def __init__(self) -> None:
        self.rows: list[ProductRecord] = []
        self.calls: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()
        # Calls whose name filter has a gate wait until the event is set
        self.count_gates: dict[str, asyncio.Event] = {}
        self.page_gates: dict[str, asyncio.Event] = {}
        self.fail_filters: dict[str, set[str]] = defaultdict(set)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def seed(self, name: str, **fields: Any) -> ProductRecord:
        record = ProductRecord(
            product_id=uuid4(),
            name=name,
            sku=fields.pop("sku", f"SKU-{len(self.rows) + 1:03d}"),
            base_price=fields.pop("base_price", Decimal("10.00")),
            stock_quantity=fields.pop("stock_quantity", 1),
            created_at=self._tick(),
            **fields,
        )
        self.rows.append(record)
        return record

    def _check(self, operation: str, name_filter: str | None = None) -> None:
        if operation in self.fail_on:
            raise RemoteStoreError(f"{operation} failed", status_code=500)
        if name_filter is not None and operation in self.fail_filters.get(name_filter, set()):
            raise RemoteStoreError(f"{operation} failed for {name_filter!r}", status_code=500)

    def _matching(self, name_filter: str) -> list[ProductRecord]:
        needle = name_filter.casefold()
        return [row for row in self.rows if needle in row.name.casefold()]

    async def count(self, name_filter: str) -> int:
        self.calls.append(("count", name_filter))
        if name_filter in self.count_gates:
            await self.count_gates[name_filter].wait()
        self._check("count", name_filter)
        return len(self._matching(name_filter))

    async def page(self, name_filter: str, *, offset: int, limit: int) -> list[ProductRecord]:
        self.calls.append(("page", (name_filter, offset, limit)))
        if name_filter in self.page_gates:
            await self.page_gates[name_filter].wait()
        self._check("page", name_filter)
        ordered = sorted(self._matching(name_filter), key=lambda row: row.created_at, reverse=True)
        return ordered[offset : offset + limit]

    async def insert(self, record: ProductWrite) -> ProductRecord:
        self.calls.append(("insert", record))
        self._check("insert")
        created = ProductRecord(product_id=uuid4(), created_at=self._tick(), **record.model_dump())
        self.rows.append(created)
        return created

    async def update(self, product_id: UUID, record: ProductWrite) -> None:
        self.calls.append(("update", (product_id, record)))
        self._check("update")
        for index, row in enumerate(self.rows):
            if row.product_id == product_id:
                self.rows[index] = row.model_copy(update=record.model_dump())
                return
        raise RecordNotFoundError(product_id)

    async def delete(self, product_id: UUID) -> None:
        self.calls.append(("delete", product_id))
        self._check("delete")
        for index, row in enumerate(self.rows):
            if row.product_id == product_id:
                del self.rows[index]
                return
        raise RecordNotFoundError(product_id)

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeImageUploader:
    """ImageUploader double that records uploads and can be told to fail."""

    def __init__(self, url: str = "http://supabase.test/storage/v1/object/public/product-images/abc.png") -> None:
        self.url = url
        self.error: Exception | None = None
        self.uploads: list[tuple[str, bytes, str]] = []

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        self.uploads.append((filename, content, content_type))
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture
def fake_table() -> FakeProductTable:
    return FakeProductTable()


@pytest.fixture
def fake_uploader() -> FakeImageUploader:
    return FakeImageUploader()


@pytest.fixture
def screen(fake_table: FakeProductTable, fake_uploader: FakeImageUploader) -> CatalogScreen:
    """Catalog screen wired to in-memory collaborators."""
    return create_catalog_screen(fake_table, fake_uploader)


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Create an isolated database with the products table."""
    engine = create_engine(
        TEST_DATABASE_URL,
        future=True,
        connect_args={"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {},
        poolclass=StaticPool if TEST_DATABASE_URL.startswith("sqlite") else None,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=db_engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Provide a database session for testing."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
