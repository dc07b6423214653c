"""
boilerplate.config.app – HTTP server, auth-token, upload and rate-limit settings.

Env vars: APP_ENV (NODE_ENV fallback), HOST, PORT, BASE_URL, CORS_ORIGINS,
GLOBAL_RATE_LIMIT, STRICT_RATE_LIMIT, LOGIN_RATE_LIMIT, TOKEN_SECRET,
TOKEN_ALGORITHM, TOKEN_EXPIRES_SECONDS, UPLOAD_DIR, UPLOAD_MAX_BYTES,
PUBLIC_DIR, DB_INIT_ON_STARTUP.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

_TRUTHY = ("1", "true", "yes")
_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


def load_env_file(path: Optional[str] = None) -> bool:
    """Load a .env file (ENV_FILE or ./.env) without overriding the real environment."""
    return load_dotenv(path or os.environ.get("ENV_FILE", ".env"), override=False)


@dataclass(frozen=True)
class AppConfig:
    """Application settings; build with AppConfig.from_env() or explicitly in tests."""

    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8080
    base_url: str = "http://localhost:8080"
    cors_origins: Tuple[str, ...] = ("http://localhost:3000", "http://127.0.0.1:3000")

    # slowapi limit strings
    global_rate_limit: str = "200 per 15 minutes"
    strict_rate_limit: str = "5 per hour"
    login_rate_limit: str = "10 per hour"

    # Auth tokens (HS* JWT)
    token_secret: Optional[str] = field(default=None, repr=False)
    token_algorithm: str = "HS256"
    token_expires_seconds: int = 60

    # Uploads and static files
    upload_dir: str = os.path.join("public", "upload")
    upload_max_bytes: int = 5 * 1024 * 1024
    public_dir: str = "public"

    # Create tables at startup (dev); disable when using migrations or in tests
    db_init_on_startup: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port!r}")
        if self.token_algorithm not in _ALGORITHMS:
            raise ValueError(
                f"token_algorithm must be one of {sorted(_ALGORITHMS)}, got {self.token_algorithm!r}"
            )
        if not isinstance(self.token_expires_seconds, int) or self.token_expires_seconds < 1:
            raise ValueError(
                f"token_expires_seconds must be an integer >= 1, got {self.token_expires_seconds!r}"
            )
        if not isinstance(self.upload_max_bytes, int) or self.upload_max_bytes < 1:
            raise ValueError(f"upload_max_bytes must be an integer >= 1, got {self.upload_max_bytes!r}")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("BASE_URL must start with http:// or https://")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def secure_transfer(self) -> bool:
        return self.base_url.startswith("https")

    @classmethod
    def from_env(cls, **overrides: object) -> AppConfig:
        """Build from environment variables; keyword overrides take precedence."""
        env = os.environ
        origins = env.get("CORS_ORIGINS")
        values: dict[str, object] = {
            "environment": env.get("APP_ENV") or env.get("NODE_ENV") or "development",
            "host": env.get("HOST", "0.0.0.0"),
            "port": int(env.get("PORT", "8080")),
            "base_url": env.get("BASE_URL", "http://localhost:8080").strip(),
            "global_rate_limit": env.get("GLOBAL_RATE_LIMIT", "200 per 15 minutes"),
            "strict_rate_limit": env.get("STRICT_RATE_LIMIT", "5 per hour"),
            "login_rate_limit": env.get("LOGIN_RATE_LIMIT", "10 per hour"),
            "token_secret": env.get("TOKEN_SECRET") or None,
            "token_algorithm": env.get("TOKEN_ALGORITHM", "HS256"),
            "token_expires_seconds": int(env.get("TOKEN_EXPIRES_SECONDS", "60")),
            "upload_dir": env.get("UPLOAD_DIR", os.path.join("public", "upload")),
            "upload_max_bytes": int(env.get("UPLOAD_MAX_BYTES", str(5 * 1024 * 1024))),
            "public_dir": env.get("PUBLIC_DIR", "public"),
            "db_init_on_startup": env.get("DB_INIT_ON_STARTUP", "true").lower() in _TRUTHY,
        }
        if origins:
            values["cors_origins"] = tuple(o.strip() for o in origins.split(",") if o.strip())
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]


def load_app_config(**overrides: object) -> AppConfig:
    return AppConfig.from_env(**overrides)
