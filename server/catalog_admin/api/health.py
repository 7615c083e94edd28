"""Health check endpoints for monitoring service and dependency status."""
from typing import Any

from fastapi import APIRouter, Depends

from catalog_admin.api.catalog import get_catalog
from catalog_admin.core.exceptions import CatalogError
from catalog_admin.services.catalog_screen import CatalogScreen

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint.

    Returns:
        Simple status response for load balancers
    """
    return {"status": "ok"}


@router.get("/health/detailed")
async def detailed_health_check(screen: CatalogScreen = Depends(get_catalog)) -> dict[str, Any]:
    """Detailed health check for the remote product store.

    Returns:
        Detailed health status for each component
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "components": {},
    }

    try:
        total = await screen.table.count("")
        health_status["components"]["product_store"] = {
            "status": "healthy",
            "message": f"Product store reachable ({total} products)",
        }
    except CatalogError as e:
        health_status["status"] = "unhealthy"
        health_status["components"]["product_store"] = {
            "status": "unhealthy",
            "message": f"Product store check failed: {e.message}",
        }

    return health_status
