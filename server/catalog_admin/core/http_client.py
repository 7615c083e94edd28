"""HTTP client construction for the hosted table and storage APIs."""
from __future__ import annotations

import httpx

from catalog_admin.core.config import Settings, get_settings


def create_http_client(
    api_key: str,
    *,
    timeout_seconds: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Return an async client that authenticates every request with the service key."""

    headers = {
        "apikey": api_key,
        "Authorization": f"Bearer {api_key}",
    }
    return httpx.AsyncClient(
        headers=headers,
        timeout=httpx.Timeout(timeout_seconds),
        transport=transport,
    )


def get_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Return a client configured from application settings.

    Args:
        settings: Optional settings instance; the cached settings are used when omitted

    Returns:
        Configured httpx.AsyncClient; the caller owns it and must close it
    """
    settings = settings or get_settings()
    return create_http_client(settings.supabase_key, timeout_seconds=settings.request_timeout_seconds)
