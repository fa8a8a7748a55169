# -*- coding: utf-8 -*-
"""
Text preparation service configuration using Pydantic BaseSettings.
"""
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central service configuration loaded from environment variables.
    Pydantic's BaseSettings provides automatic validation, type casting,
    and reading from .env files.
    """

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8002

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # API Documentation (disable in production)
    DOCS_ENABLED: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False

    # Request tracking
    REQUEST_ID_HEADER: str = "X-Request-ID"

    # Compression
    GZIP_MIN_SIZE: int = 1000

    # ==========================================================================
    # Preparation defaults (overridable per request through options)
    # ==========================================================================

    # Input is truncated to this many characters before any parsing
    DEFAULT_MAX_CHARS: int = 120_000

    # Deepest heading level kept in the outline and used for promotions
    DEFAULT_MAX_HEADING_DEPTH: int = 4

    # "keep" leaves tables as pipe tables, "kv" flattens them to key: value text
    DEFAULT_TABLE_MODE: Literal["keep", "kv"] = "keep"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Global configuration instance
settings = Settings()
