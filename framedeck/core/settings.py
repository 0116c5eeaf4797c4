# framedeck/core/settings.py

"""
Configuration settings for framedeck using Pydantic models.

This module defines the configuration structure for the framedeck package:
the relational database connection and its pool, the HTTP server, and the
API client used by the editors. It is the only place environment variables
are read; a `.env` file is loaded first when present (local dev).
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
)

from ..exceptions import ConfigurationError

logger = logging.getLogger("framedeck")

DEFAULT_SQLITE_URL = "sqlite:///framedeck.db"
DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]
DEFAULT_API_URL = "http://localhost:3001"

class PoolOptions(BaseModel):
    """Connection pool limits for the storage layer."""
    size: int = Field(default=5, gt=0)  # Upper bound of pooled connections
    acquire_timeout: float = Field(default=30.0, gt=0)  # Seconds to wait for a free connection
    recycle_after: int = Field(default=1800, gt=0)  # Max age in seconds before a connection is replaced

class DatabaseConfig(BaseModel):
    """Relational store connection settings."""
    url: str
    pool: PoolOptions = Field(default_factory=PoolOptions)
    echo: bool = False  # Log SQL statements at DEBUG

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensure the URL names a dialect."""
        v = v.strip()
        if "://" not in v:
            raise ConfigurationError(f"Invalid database URL: {v!r}", field="url")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_memory(self) -> bool:
        """Check if this is an in-process SQLite database."""
        return self.is_sqlite and (
            self.url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in self.url
        )

    @property
    def safe_url(self) -> str:
        """URL with the password masked, suitable for logs."""
        if "@" not in self.url:
            return self.url
        scheme, rest = self.url.split("://", 1)
        credentials, location = rest.rsplit("@", 1)
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:***@{location}"

class FramedeckSettings(BaseModel):
    """
    Main configuration for framedeck.

    Groups the database settings with the HTTP server options and the base
    URL the terminal editor uses to reach the API.
    """
    database: DatabaseConfig
    host: str = "127.0.0.1"
    port: int = Field(default=3001, gt=0, lt=65536)
    debug: bool = False
    title: str = "framedeck"
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    api_url: str = DEFAULT_API_URL
    template_override: Optional[Path] = None

    @field_validator('api_url')
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensure the API URL is absolute and has no trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ConfigurationError(f"API URL must be absolute: {v!r}", field="api_url")
        return v.rstrip('/')

    @field_validator('template_override')
    @classmethod
    def validate_template_dir(cls, v: Optional[Union[str, Path]]) -> Optional[Path]:
        """Validate that a template override directory exists."""
        if v is None:
            return None
        path = Path(v)
        if not path.is_dir():
            raise ConfigurationError(f"Template directory does not exist: {path}", field="template_override")
        return path.absolute()


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getenv_bool(name: str, default: bool = False) -> bool:
    v = _getenv(name)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


def _split_origins(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def database_url_from_env() -> str:
    """
    Build the database URL from the environment.

    DATABASE_URL wins. Otherwise the DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD
    variables describe a PostgreSQL server. With neither, a local SQLite file
    is used.
    """
    url = _getenv("DATABASE_URL")
    if url:
        return url

    host = _getenv("DB_HOST")
    if not host:
        logger.warning(f"No database configured, falling back to {DEFAULT_SQLITE_URL}")
        return DEFAULT_SQLITE_URL

    port = _getenv("DB_PORT", "5432")
    name = _getenv("DB_NAME", "framedeck")
    user = _getenv("DB_USER")
    password = _getenv("DB_PASSWORD")

    credentials = ""
    if user:
        credentials = quote_plus(user)
        if password:
            credentials = f"{credentials}:{quote_plus(password)}"
        credentials = f"{credentials}@"

    return f"postgresql+psycopg://{credentials}{host}:{port}/{name}"


def load_settings(env_file: Optional[Union[str, Path]] = None, **overrides: Any) -> FramedeckSettings:
    """
    Centralized config: this is the ONLY place env vars are read.

    - Loads `.env` if present (never overriding variables already set)
    - Keyword overrides win over the environment; None values are ignored
    - `database_url` is accepted as a shortcut for the database URL
    """
    load_dotenv(dotenv_path=env_file, override=False)

    overrides = {key: value for key, value in overrides.items() if value is not None}
    debug = overrides.pop("debug", None)
    if debug is None:
        debug = _getenv_bool("FRAMEDECK_DEBUG")

    pool: Dict[str, Any] = {}
    for key, env_name in (
        ("size", "DB_POOL_MAX"),
        ("acquire_timeout", "DB_POOL_ACQUIRE_TIMEOUT"),
        ("recycle_after", "DB_POOL_RECYCLE"),
    ):
        value = _getenv(env_name)
        if value is not None:
            pool[key] = value

    data: Dict[str, Any] = {
        "database": {
            "url": overrides.pop("database_url", None) or database_url_from_env(),
            "pool": pool,
            "echo": debug,
        },
        "host": _getenv("HOST", "127.0.0.1"),
        "port": _getenv("PORT", "3001"),
        "debug": debug,
        "cors_origins": _split_origins(_getenv("FRAMEDECK_CORS_ORIGINS")) or list(DEFAULT_CORS_ORIGINS),
        "api_url": _getenv("FRAMEDECK_API_URL", DEFAULT_API_URL),
    }

    for key, value in overrides.items():
        if key not in FramedeckSettings.model_fields:
            raise ConfigurationError(f"Unknown setting: {key}")
        data[key] = value

    try:
        return FramedeckSettings(**data)
    except ValidationError as e:
        raise ConfigurationError(str(e))
