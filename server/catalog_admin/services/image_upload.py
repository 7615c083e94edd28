"""Image upload delegated to the hosted object storage API."""
from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Protocol
from uuid import uuid4

import httpx

from catalog_admin.core.exceptions import UploadError

logger = logging.getLogger(__name__)


class ImageUploader(Protocol):
    """Stores an image and returns its public URL. Single attempt, no retries."""

    async def upload(self, filename: str, content: bytes, content_type: str) -> str: ...


class StorageImageUploader:
    """Uploads product images into a storage bucket."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        storage_url: str,
        bucket: str = "product-images",
        *,
        max_size_mb: int = 5,
    ) -> None:
        self._client = client
        self._storage_url = storage_url.rstrip("/")
        self._bucket = bucket
        self._max_size_bytes = max_size_mb * 1024 * 1024

    def object_path(self, filename: str) -> str:
        """Random object name that keeps the original file extension."""
        suffix = PurePath(filename).suffix.lower()
        return f"{uuid4().hex}{suffix}"

    def public_url(self, path: str) -> str:
        return f"{self._storage_url}/object/public/{self._bucket}/{path}"

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """Upload an image file and return its public URL.

        Args:
            filename: Original file name supplied by the operator
            content: Raw file bytes
            content_type: MIME type reported for the file

        Returns:
            Public URL of the stored object

        Raises:
            UploadError: If the file is rejected or the storage call fails
        """
        if not content_type or not content_type.startswith("image/"):
            raise UploadError(f"Unsupported file type: {content_type or 'unknown'}")
        if not content:
            raise UploadError("Uploaded file is empty")
        if len(content) > self._max_size_bytes:
            size_mb = len(content) / (1024 * 1024)
            raise UploadError(
                f"File size ({size_mb:.2f} MB) exceeds maximum allowed size "
                f"({self._max_size_bytes // (1024 * 1024)} MB)"
            )

        path = self.object_path(filename)
        url = f"{self._storage_url}/object/{self._bucket}/{path}"
        logger.info(f"Uploading {filename} to {self._bucket}/{path} ({len(content)} bytes)")

        try:
            response = await self._client.post(
                url,
                content=content,
                headers={"Content-Type": content_type, "x-upsert": "false"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Image upload to {url} failed: {e}")
            raise UploadError(f"Image upload failed: {e}") from e

        if response.is_error:
            logger.warning(f"Image upload to {url} returned {response.status_code}: {response.text[:200]}")
            raise UploadError(
                f"Image upload rejected with status {response.status_code}",
                details={"status_code": response.status_code},
            )

        return self.public_url(path)
