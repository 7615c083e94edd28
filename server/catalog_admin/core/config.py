"""Application configuration loaded from environment variables."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central place for strongly typed application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Product Catalog Admin")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")

    supabase_url: str = Field(validation_alias="SUPABASE_URL")
    supabase_key: str = Field(validation_alias="SUPABASE_KEY")
    products_table: str = Field(default="products")
    storage_bucket: str = Field(default="product-images")

    table_backend: Literal["postgrest", "sql"] = Field(default="postgrest")
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

    page_size: int = Field(default=9, ge=1)
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    max_image_size_mb: int = Field(default=5, ge=1)

    @model_validator(mode="after")
    def convert_database_url(self) -> "Settings":
        """Convert postgresql+psycopg:// (psycopg3) to postgresql:// (psycopg2)."""
        if self.database_url and self.database_url.startswith("postgresql+psycopg://"):
            self.database_url = self.database_url.replace("postgresql+psycopg://", "postgresql://")
        return self

    @model_validator(mode="after")
    def require_database_url_for_sql(self) -> "Settings":
        if self.table_backend == "sql" and not self.database_url:
            msg = "DATABASE_URL is required when table_backend is 'sql'"
            raise ValueError(msg)
        return self

    @property
    def rest_url(self) -> str:
        """Base URL of the table REST API."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    @property
    def storage_url(self) -> str:
        """Base URL of the object storage API."""
        return f"{self.supabase_url.rstrip('/')}/storage/v1"


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance so downstream code can import directly."""

    return Settings()
