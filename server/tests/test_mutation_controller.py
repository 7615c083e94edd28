"""Tests for MutationController create, update, delete and image handling."""
from __future__ import annotations

from decimal import Decimal

import pytest

from catalog_admin.core.exceptions import UploadError
from catalog_admin.models.product import ProductStatus, ProductVisibility
from catalog_admin.schemas.product import ProductDraft
from catalog_admin.services.catalog_screen import CatalogScreen
from catalog_admin.services.mutation_controller import (
    CREATED_MESSAGE,
    DELETE_FAILED_MESSAGE,
    DELETED_MESSAGE,
    SAVE_FAILED_MESSAGE,
    UPDATED_MESSAGE,
    UPLOAD_FAILED_MESSAGE,
    UPLOADED_MESSAGE,
)
from tests.conftest import FakeImageUploader, FakeProductTable


def messages(screen: CatalogScreen) -> list[tuple[str, str]]:
    return [(n.kind.value, n.message) for n in screen.notifier.drain()]


class TestSubmitCreate:
    """Test suite for creating products."""

    @pytest.mark.asyncio
    async def test_create_widget(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test creating a product from a minimal draft."""
        screen.mutation.update_draft(name="Widget", base_price=Decimal("9.99"), stock_quantity=0)

        saved = await screen.mutation.submit()

        assert saved is True
        assert len(fake_table.rows) == 1
        product = fake_table.rows[0]
        assert product.slug == "widget"
        assert product.is_in_stock is False
        assert product.status == ProductStatus.DRAFT
        assert product.visibility == ProductVisibility.VISIBLE
        assert product.sku
        assert product.sku.startswith("SKU-")
        assert product.upc is None
        assert product.main_image_url is None
        assert messages(screen) == [("success", CREATED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_create_resets_draft_and_refreshes(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test that a successful create clears the draft and reloads the list."""
        screen.mutation.update_draft(name="Lamp", stock_quantity=3)

        await screen.mutation.submit()

        assert screen.mutation.draft == ProductDraft()
        assert screen.mutation.editing_target is None
        assert fake_table.operations() == ["insert", "count", "page"]
        assert [p.name for p in screen.query.products] == ["Lamp"]

    @pytest.mark.asyncio
    async def test_refresh_uses_current_search_and_page(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test the post-save refresh keeps the current search and page."""
        for i in range(12):
            fake_table.seed(f"Lamp {i}")
        await screen.query.set_search("lamp")
        await screen.query.next_page()

        screen.mutation.update_draft(name="Lamp new")
        await screen.mutation.submit()

        assert fake_table.calls[-1] == ("page", ("lamp", 9, 9))

    @pytest.mark.asyncio
    async def test_explicit_sku_is_sent(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test an operator-provided SKU is kept."""
        screen.mutation.update_draft(name="Lamp", sku="LAMP-001")

        await screen.mutation.submit()

        assert fake_table.rows[0].sku == "LAMP-001"

    @pytest.mark.asyncio
    async def test_failure_keeps_draft(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test that a failed create keeps the draft for retry."""
        fake_table.fail_on.add("insert")
        screen.mutation.update_draft(name="Lamp", description="Warm light")

        saved = await screen.mutation.submit()

        assert saved is False
        assert screen.mutation.draft.name == "Lamp"
        assert screen.mutation.draft.description == "Warm light"
        assert fake_table.operations() == ["insert"]
        assert messages(screen) == [("error", SAVE_FAILED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_invalid_draft_makes_no_remote_call(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test validation failures never reach the store."""
        screen.mutation.update_draft(name="  ", stock_quantity=-1)

        saved = await screen.mutation.submit()

        assert saved is False
        assert fake_table.calls == []
        notes = messages(screen)
        assert len(notes) == 1
        assert notes[0][0] == "error"
        assert "Product name is required" in notes[0][1]
        assert "Stock quantity cannot be negative" in notes[0][1]


class TestSubmitUpdate:
    """Test suite for editing products."""

    @pytest.mark.asyncio
    async def test_begin_edit_seeds_draft(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test beginning an edit copies the product into the draft."""
        product = fake_table.seed("Kettle", sku="KET-1", stock_quantity=4, description=None)

        screen.mutation.begin_edit(product)

        assert screen.mutation.editing_target == product
        assert screen.mutation.is_editing is True
        assert screen.mutation.draft.name == "Kettle"
        assert screen.mutation.draft.sku == "KET-1"
        assert screen.mutation.draft.description == ""
        assert fake_table.calls == []

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test updating a product sends the full normalized field set."""
        product = fake_table.seed("Kettle", sku="KET-1", stock_quantity=4)
        await screen.query.refresh()
        screen.mutation.begin_edit(product)
        screen.mutation.update_draft(name="Steel Kettle!", stock_quantity=0)

        saved = await screen.mutation.submit()

        assert saved is True
        operation, (product_id, record) = fake_table.calls[2]
        assert operation == "update"
        assert product_id == product.product_id
        assert record.slug == "steel-kettle"
        assert record.is_in_stock is False
        assert record.sku == "KET-1"
        assert screen.mutation.editing_target is None
        assert screen.mutation.draft == ProductDraft()
        assert [p.name for p in screen.query.products] == ["Steel Kettle!"]
        assert messages(screen) == [("success", UPDATED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_update_failure_keeps_edit_state(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test that a failed update keeps the draft and edit target."""
        product = fake_table.seed("Kettle")
        screen.mutation.begin_edit(product)
        screen.mutation.update_draft(name="Kettle v2")
        fake_table.fail_on.add("update")

        saved = await screen.mutation.submit()

        assert saved is False
        assert screen.mutation.editing_target == product
        assert screen.mutation.draft.name == "Kettle v2"
        assert messages(screen) == [("error", SAVE_FAILED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_update_of_missing_product_fails(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test updating a product that no longer exists."""
        product = fake_table.seed("Kettle")
        screen.mutation.begin_edit(product)
        fake_table.rows.clear()

        assert await screen.mutation.submit() is False
        assert screen.mutation.editing_target == product

    @pytest.mark.asyncio
    async def test_begin_create_abandons_edit(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test starting a new product abandons the edit."""
        screen.mutation.begin_edit(fake_table.seed("Kettle"))

        screen.mutation.begin_create()

        assert screen.mutation.editing_target is None
        assert screen.mutation.draft == ProductDraft()


class TestDelete:
    """Test suite for deleting products."""

    @pytest.mark.asyncio
    async def test_unconfirmed_delete_is_noop(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test delete does nothing without confirmation."""
        product = fake_table.seed("Kettle")

        deleted = await screen.mutation.delete(product, lambda _: False)

        assert deleted is False
        assert fake_table.calls == []
        assert len(fake_table.rows) == 1
        assert messages(screen) == []

    @pytest.mark.asyncio
    async def test_confirmed_delete_refreshes(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test confirmed delete removes the product and reloads."""
        kettle = fake_table.seed("Kettle")
        fake_table.seed("Toaster")
        await screen.query.refresh()
        asked: list = []

        def confirm(product) -> bool:
            asked.append(product)
            return True

        deleted = await screen.mutation.delete(kettle, confirm)

        assert deleted is True
        assert asked == [kettle]
        assert [p.name for p in screen.query.products] == ["Toaster"]
        assert fake_table.operations()[-3:] == ["delete", "count", "page"]
        assert messages(screen) == [("success", DELETED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_failed_delete_leaves_list_unchanged(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test a failed delete leaves the list unchanged."""
        kettle = fake_table.seed("Kettle")
        fake_table.seed("Toaster")
        await screen.query.refresh()
        before = list(screen.query.products)
        fake_table.fail_on.add("delete")

        deleted = await screen.mutation.delete(kettle, lambda _: True)

        assert deleted is False
        assert screen.query.products == before
        assert fake_table.operations()[-1] == "delete"
        assert messages(screen) == [("error", DELETE_FAILED_MESSAGE)]


class TestImages:
    """Test suite for image upload and attachment."""

    def test_attach_uploaded_image(self, screen: CatalogScreen, fake_table: FakeProductTable) -> None:
        """Test attaching an image URL has no remote effect."""
        screen.mutation.attach_uploaded_image("http://img/lamp.png")

        assert screen.mutation.draft.main_image_url == "http://img/lamp.png"
        assert fake_table.calls == []

    @pytest.mark.asyncio
    async def test_upload_attaches_url(
        self, screen: CatalogScreen, fake_uploader: FakeImageUploader, fake_table: FakeProductTable
    ) -> None:
        """Test a successful upload attaches the URL to the draft."""
        url = await screen.mutation.upload_image("lamp.png", b"\x89PNG", "image/png")

        assert url == fake_uploader.url
        assert screen.mutation.draft.main_image_url == fake_uploader.url
        assert fake_uploader.uploads == [("lamp.png", b"\x89PNG", "image/png")]
        assert fake_table.calls == []
        assert messages(screen) == [("success", UPLOADED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_upload_failure_leaves_draft(
        self, screen: CatalogScreen, fake_uploader: FakeImageUploader
    ) -> None:
        """Test a failed upload leaves the draft unchanged."""
        screen.mutation.attach_uploaded_image("http://img/old.png")
        fake_uploader.error = UploadError("storage down")

        url = await screen.mutation.upload_image("lamp.png", b"\x89PNG", "image/png")

        assert url is None
        assert screen.mutation.draft.main_image_url == "http://img/old.png"
        assert messages(screen) == [("error", UPLOAD_FAILED_MESSAGE)]

    @pytest.mark.asyncio
    async def test_image_url_persisted_on_submit(
        self, screen: CatalogScreen, fake_table: FakeProductTable
    ) -> None:
        """Test the attached image URL is saved on submit."""
        screen.mutation.update_draft(name="Lamp")
        screen.mutation.attach_uploaded_image("http://img/lamp.png")

        await screen.mutation.submit()

        assert fake_table.rows[0].main_image_url == "http://img/lamp.png"
