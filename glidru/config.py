"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_LOCAL_TOKEN_SECRET = "dev-token-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 3001
    api_prefix: str = "/api"
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # Backends
    # ==========================================================================

    # Forces the in-memory store and local identity provider even when
    # Firebase credentials are present
    use_in_memory_backends: bool = False

    firebase_credentials_path: str = ""
    firebase_project_id: str = ""

    questions_collection: str = "questions"
    users_collection: str = "users"

    # Admin user listing is capped, like the identity provider's own page size
    user_list_page_size: int = 1000

    # ==========================================================================
    # Local identity provider (development / tests only)
    # ==========================================================================

    local_token_secret: str = DEFAULT_LOCAL_TOKEN_SECRET
    local_token_algorithm: str = "HS256"
    local_token_expire_minutes: int = 60

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def use_firebase(self) -> bool:
        """Whether Firebase Auth and Firestore should back the API."""
        if self.use_in_memory_backends:
            return False
        return bool(self.firebase_credentials_path or self.firebase_project_id)

    @property
    def uses_default_token_secret(self) -> bool:
        return self.local_token_secret == DEFAULT_LOCAL_TOKEN_SECRET

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Send log records to stdout at the configured level."""
    level = (level or get_settings().log_level).upper()

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    # Quiet the Google client libraries
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
