"""
Access-log configuration (sinks, rotation thresholds, template mode).

Env vars: ACCESS_LOG_ENABLED, ACCESS_LOG_DIR, ACCESS_LOG_OUT_FILE,
ACCESS_LOG_ERROR_FILE, ACCESS_LOG_MAX_BYTES, ACCESS_LOG_OUT_MAX_BYTES,
ACCESS_LOG_ERROR_MAX_BYTES, ACCESS_LOG_CHECK_INTERVAL, APP_ENV (or NODE_ENV).
"""
from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = ("1", "true", "yes")

DEFAULT_MAX_BYTES = 1024 * 1024  # 1 MB


def _env_is_production() -> bool:
    env = os.environ.get("APP_ENV") or os.environ.get("NODE_ENV") or ""
    return env.strip().lower() == "production"


@dataclass(frozen=True)
class AccessLogConfig:
    """Where access lines go and when the sink files are truncated."""

    enabled: bool = True
    # Compact single-line template when True, verbose template otherwise
    production: bool = False
    log_dir: str = "logs"
    # Sink for status < 400
    out_file: str = "out.log"
    # Sink for status >= 400
    error_file: str = "error.log"
    # Truncate a sink once its size is strictly greater than this
    out_max_bytes: int = DEFAULT_MAX_BYTES
    error_max_bytes: int = DEFAULT_MAX_BYTES
    # Seconds between rotation checks
    check_interval: float = 1.0

    def __post_init__(self) -> None:
        if not self.log_dir or not str(self.log_dir).strip():
            raise ValueError("log_dir must be a non-empty path")
        if not self.out_file or not self.error_file:
            raise ValueError("out_file and error_file must be non-empty")
        if self.out_file == self.error_file:
            raise ValueError("out_file and error_file must differ")
        for name in ("out_max_bytes", "error_max_bytes"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be an integer >= 1, got {value!r}")
        if self.check_interval <= 0:
            raise ValueError(f"check_interval must be > 0, got {self.check_interval!r}")

    @property
    def out_path(self) -> str:
        return os.path.join(self.log_dir, self.out_file)

    @property
    def error_path(self) -> str:
        return os.path.join(self.log_dir, self.error_file)

    @classmethod
    def from_env(cls, **overrides: object) -> "AccessLogConfig":
        """
        Build config from environment variables; keyword overrides win.

        ACCESS_LOG_MAX_BYTES sets both thresholds; the per-sink variables
        override it for one sink.
        """
        shared_max = int(os.environ.get("ACCESS_LOG_MAX_BYTES", DEFAULT_MAX_BYTES))
        values: dict[str, object] = {
            "enabled": os.environ.get("ACCESS_LOG_ENABLED", "true").lower() in _TRUTHY,
            "production": _env_is_production(),
            "log_dir": os.environ.get("ACCESS_LOG_DIR", "logs"),
            "out_file": os.environ.get("ACCESS_LOG_OUT_FILE", "out.log"),
            "error_file": os.environ.get("ACCESS_LOG_ERROR_FILE", "error.log"),
            "out_max_bytes": int(os.environ.get("ACCESS_LOG_OUT_MAX_BYTES", shared_max)),
            "error_max_bytes": int(os.environ.get("ACCESS_LOG_ERROR_MAX_BYTES", shared_max)),
            "check_interval": float(os.environ.get("ACCESS_LOG_CHECK_INTERVAL", "1.0")),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
