"""Core application utilities and infrastructure."""
from .config import Settings, get_settings
from .exceptions import (
    CatalogError,
    DraftValidationError,
    RecordNotFoundError,
    RemoteStoreError,
    UploadError,
)
from .http_client import create_http_client, get_http_client

__all__ = [
    "Settings",
    "get_settings",
    "CatalogError",
    "DraftValidationError",
    "RecordNotFoundError",
    "RemoteStoreError",
    "UploadError",
    "create_http_client",
    "get_http_client",
]
