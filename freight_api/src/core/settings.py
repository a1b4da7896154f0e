from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    This is separate from src.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Freight API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Backend API for freight loads and their receipt documents. "
            "Normalizes blob storage references and keeps loads, standalone "
            "receipts and stored blobs consistent."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Startup behavior
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=True,
        description="If true, run Alembic migrations (upgrade head) at app startup.",
    )

    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    # Blob store
    BLOB_STORE_BACKEND: Literal["http", "memory"] = Field(
        default="http",
        description="'http' talks to the external object store; 'memory' keeps blobs in-process (dev/test).",
    )
    BLOB_STORE_URL: str = Field(
        default="http://localhost:3210/api/storage",
        description="Base URL of the object store HTTP API.",
    )
    BLOB_STORE_API_KEY: Optional[str] = Field(
        default=None, description="Bearer token sent to the object store, if required."
    )
    BLOB_STORE_TIMEOUT_SECONDS: float = Field(
        default=10.0, gt=0, description="Per-request timeout for object store calls."
    )

    # Automatically load from .env at runtime. The orchestrator will provide these.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            # Try comma-separated
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    Note:
      For simplicity we construct a new instance each time. If caching is desired,
      we can add a module-level cache or lru_cache.
    """
    return AppSettings()
