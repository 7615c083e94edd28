"""Create/update/delete controller for the product form."""
from __future__ import annotations

import logging
from typing import Any, Callable

from catalog_admin.core.exceptions import CatalogError, DraftValidationError, UploadError
from catalog_admin.schemas.product import ProductDraft, ProductRecord, ProductWrite, generate_sku
from catalog_admin.services.image_upload import ImageUploader
from catalog_admin.services.notifier import Notifier
from catalog_admin.services.product_table import ProductTable
from catalog_admin.services.query_controller import QueryController

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "Product created successfully"
UPDATED_MESSAGE = "Product updated successfully"
SAVE_FAILED_MESSAGE = "Failed to save product"
DELETED_MESSAGE = "Product deleted successfully"
DELETE_FAILED_MESSAGE = "Failed to delete product"
UPLOADED_MESSAGE = "Image uploaded successfully"
UPLOAD_FAILED_MESSAGE = "Failed to upload image"

ConfirmCallback = Callable[[ProductRecord], bool]


class MutationController:
    """Owns the single active draft and turns it into persisted products.

    The draft is either a new product (``editing_target is None``) or an edit
    of ``editing_target``; never both. After every successful write the list
    is refreshed at the current search text and page.
    """

    def __init__(
        self,
        table: ProductTable,
        query: QueryController,
        notifier: Notifier,
        uploader: ImageUploader | None = None,
        *,
        sku_factory: Callable[[], str] = generate_sku,
    ) -> None:
        self._table = table
        self._query = query
        self._notifier = notifier
        self._uploader = uploader
        self._sku_factory = sku_factory
        self.draft = ProductDraft()
        self.editing_target: ProductRecord | None = None

    @property
    def is_editing(self) -> bool:
        return self.editing_target is not None

    def begin_create(self) -> None:
        """Discard the current draft and start an empty one."""
        self.draft = ProductDraft()
        self.editing_target = None

    def begin_edit(self, product: ProductRecord) -> None:
        """Seed the draft from an already loaded product."""
        self.draft = ProductDraft.from_record(product)
        self.editing_target = product

    def update_draft(self, **changes: Any) -> ProductDraft:
        """Apply operator edits to the draft.

        Raises:
            pydantic.ValidationError: If a value has the wrong type or names an unknown field
        """
        self.draft = self.draft.model_validate({**self.draft.model_dump(), **changes})
        return self.draft

    def attach_uploaded_image(self, url: str) -> None:
        """Point the draft at an uploaded image; persisted on the next submit."""
        self.draft.main_image_url = url

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> str | None:
        """Upload an image and attach its URL to the draft.

        Returns:
            The public URL, or None if the upload failed
        """
        if self._uploader is None:
            logger.error("Image upload requested but no uploader is configured")
            self._notifier.error(UPLOAD_FAILED_MESSAGE)
            return None
        try:
            url = await self._uploader.upload(filename, content, content_type)
        except UploadError as e:
            logger.error(f"Error uploading image {filename}: {e}")
            self._notifier.error(UPLOAD_FAILED_MESSAGE)
            return None

        self.attach_uploaded_image(url)
        self._notifier.success(UPLOADED_MESSAGE)
        return url

    async def submit(self) -> bool:
        """Validate, normalize and persist the draft.

        On failure the draft and editing target are kept so the operator can retry.

        Returns:
            True if the product was saved
        """
        try:
            record = ProductWrite.from_draft(self.draft, sku_factory=self._sku_factory)
        except DraftValidationError as e:
            logger.warning(f"Rejected invalid product draft: {e.errors}")
            self._notifier.error(e.message)
            return False

        target = self.editing_target
        try:
            if target is not None:
                await self._table.update(target.product_id, record)
            else:
                created = await self._table.insert(record)
                logger.info(f"Created product {created.product_id} (sku={record.sku})")
        except CatalogError as e:
            logger.error(f"Error saving product {record.sku}: {e}")
            self._notifier.error(SAVE_FAILED_MESSAGE)
            return False

        if target is not None:
            logger.info(f"Updated product {target.product_id}")
            self._notifier.success(UPDATED_MESSAGE)
        else:
            self._notifier.success(CREATED_MESSAGE)

        self.begin_create()
        await self._query.refresh()
        return True

    async def delete(self, product: ProductRecord, confirm: ConfirmCallback) -> bool:
        """Delete a product after the operator confirms.

        Args:
            product: Product to remove
            confirm: Asked once; deletion proceeds only if it returns True

        Returns:
            True if the product was deleted
        """
        if not confirm(product):
            logger.debug(f"Delete of product {product.product_id} not confirmed")
            return False

        try:
            await self._table.delete(product.product_id)
        except CatalogError as e:
            logger.error(f"Error deleting product {product.product_id}: {e}")
            self._notifier.error(DELETE_FAILED_MESSAGE)
            return False

        logger.info(f"Deleted product {product.product_id}")
        self._notifier.success(DELETED_MESSAGE)
        await self._query.refresh()
        return True
