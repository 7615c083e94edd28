"""Entrypoint for the FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_admin.api import catalog, health
from catalog_admin.core.config import get_settings
from catalog_admin.core.http_client import get_http_client
from catalog_admin.services.catalog_screen import build_catalog_screen

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared HTTP client and the catalog screen for the app's lifetime."""
    logger.info(f"Starting {settings.app_name} ({settings.environment})")
    client = get_http_client(settings)
    screen, engine = build_catalog_screen(settings, client)
    app.state.catalog = screen

    try:
        yield
    finally:
        logger.info("Shutting down...")
        await client.aclose()
        if engine is not None:
            engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Product catalog administration: search, paginate, create, edit and delete products",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

# Register API routers
app.include_router(health.router)  # Health checks at root level
app.include_router(catalog.router, prefix=settings.api_prefix)
