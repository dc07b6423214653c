"""
boilerplate.config.database – relational database connection config (dataclass + validators).

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE, DB_ECHO.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

# Sync URL scheme -> async driver used by the engine
ASYNC_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "postgres": "postgresql+asyncpg",
    "mysql": "mysql+aiomysql",
    "sqlite": "sqlite+aiosqlite",
}


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ValueError("DATABASE_URL is required and must be non-empty")
    scheme = url.split("://", 1)[0] if "://" in url else ""
    dialect = scheme.split("+", 1)[0]
    if dialect not in ASYNC_DRIVERS:
        raise ValueError(
            "DATABASE_URL must use one of the schemes "
            f"{sorted(ASYNC_DRIVERS)} (optionally with +driver), got {scheme or url!r}"
        )
    return url


def _validate_positive_int(value: int, name: str, min_val: int = 1) -> int:
    if not isinstance(value, int) or value < min_val:
        raise ValueError(f"{name} must be an integer >= {min_val}, got {value!r}")
    return value


def _validate_nonnegative_int(value: int, name: str) -> int:
    if not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def make_async_url(url: str) -> str:
    """Add the async driver to a plain URL (postgresql:// -> postgresql+asyncpg://)."""
    scheme, sep, rest = url.partition("://")
    if not sep or "+" in scheme:
        return url
    driver = ASYNC_DRIVERS.get(scheme)
    return f"{driver}://{rest}" if driver else url


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Connection and pool configuration for the CRUD passthrough.

    All fields are validated on construction. Use load_database_config()
    to build from environment variables.
    """

    url: str
    """DSN (postgresql://, mysql://, sqlite://, with or without +driver)."""

    pool_size: int = 10
    """Number of connections to keep in the pool."""

    max_overflow: int = 20
    """Extra connections allowed above pool_size."""

    pool_timeout: int = 30
    """Seconds to wait for a connection from the pool."""

    pool_recycle: int = 1800
    """Seconds after which a connection is recycled (e.g. 30 min)."""

    echo: bool = False
    """Log SQL statements (debug)."""

    def __post_init__(self) -> None:
        _validate_url(self.url)
        _validate_positive_int(self.pool_size, "pool_size")
        _validate_nonnegative_int(self.max_overflow, "max_overflow")
        _validate_positive_int(self.pool_timeout, "pool_timeout")
        _validate_positive_int(self.pool_recycle, "pool_recycle")
        if not isinstance(self.echo, bool):
            raise ValueError("echo must be a boolean")

    @property
    def async_url(self) -> str:
        return make_async_url(self.url)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @classmethod
    def from_env(cls, **overrides: object) -> DatabaseConfig:
        """
        Build config from environment variables.

        Env:
            DATABASE_URL          – default postgresql://localhost/boilerplate
            DB_POOL_SIZE          – default 10
            DB_MAX_OVERFLOW       – default 20
            DB_POOL_TIMEOUT       – default 30
            DB_POOL_RECYCLE       – default 1800
            DB_ECHO               – "1" / "true" / "yes" → True

        Overrides (keyword args) take precedence over env.
        """
        raw_url = overrides.get("url")
        if raw_url is None:
            raw_url = os.environ.get("DATABASE_URL", "postgresql://localhost/boilerplate")
        url = _validate_url(str(raw_url).strip())

        _env_int = {
            "pool_size": "DB_POOL_SIZE",
            "max_overflow": "DB_MAX_OVERFLOW",
            "pool_timeout": "DB_POOL_TIMEOUT",
            "pool_recycle": "DB_POOL_RECYCLE",
        }

        def _int(attr: str, default: int) -> int:
            v = overrides.get(attr)
            if v is not None:
                return int(v)  # type: ignore[arg-type]
            return int(os.environ.get(_env_int[attr], default))

        def _bool(attr: str, default: bool) -> bool:
            v = overrides.get(attr)
            if v is not None:
                return bool(v) if not isinstance(v, str) else v.lower() in ("1", "true", "yes")
            raw = os.environ.get("DB_ECHO", "").strip().lower()
            return raw in ("1", "true", "yes") if raw else default

        return cls(
            url=url,
            pool_size=_int("pool_size", 10),
            max_overflow=_int("max_overflow", 20),
            pool_timeout=_int("pool_timeout", 30),
            pool_recycle=_int("pool_recycle", 1800),
            echo=_bool("echo", False),
        )


def load_database_config(**overrides: object) -> DatabaseConfig:
    """
    Load and validate database config from environment (with optional overrides).

    Returns:
        Validated DatabaseConfig. Raises ValueError on invalid env/values.
    """
    return DatabaseConfig.from_env(**overrides)
