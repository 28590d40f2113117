"""
KBlog Backend — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory and the store builder.
When:  Loaded once at module import time. Tests build their own Settings
       and hand them to create_app().
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development: an in-memory store,
    the reference error-status policy and local CORS origins.
    """

    # ── Storage ───────────────────────────────────────────────────────────
    # What: Which repository implementation backs the BlogStore
    # Values: "memory" (ordered dict per entity) or "sql" (SQLAlchemy tables)
    storage_backend: str = Field(default="memory")

    # What: SQLAlchemy URL used only when storage_backend == "sql"
    # Why pysqlite in-memory: Works without any external service
    database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="SQLAlchemy connection URL for the sql storage backend",
    )

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        """Ensures the storage backend is one we can build."""
        valid = {"memory", "sql"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"Invalid storage_backend '{v}'. Must be one of: {valid}")
        return lower

    # ── Error Policy ──────────────────────────────────────────────────────
    # What: HTTP status returned when a post or comment id does not exist
    # Default 500: existing API clients rely on it (GET/DELETE of a
    # missing id is reported as a server fault). Set to 404 to opt into
    # REST-style not-found responses.
    not_found_status: int = Field(default=500)

    @field_validator("not_found_status")
    @classmethod
    def validate_not_found_status(cls, v: int) -> int:
        if v not in (404, 500):
            raise ValueError(f"Invalid not_found_status '{v}'. Must be 404 or 500")
        return v

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # STORAGE_BACKEND and storage_backend both work
    }


# Singleton instance: default configuration for the module-level app
settings = Settings()
