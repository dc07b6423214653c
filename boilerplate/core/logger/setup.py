"""
Logger setup: attach console and rotating JSON file handlers from config.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from boilerplate.core.logger.config import LoggerConfig
from boilerplate.core.logger.formatters import (
    ColorConsoleFormatter,
    JsonFormatter,
    PlainConsoleFormatter,
)

# Module-level default config; replaced by configure()
_default_config: Optional[LoggerConfig] = None


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def configure(config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Configure the project root logger with the given config.
    If config is None, uses LoggerConfig.from_env().
    Call once at application startup; returns the configured root logger.
    """
    global _default_config
    if config is None:
        config = LoggerConfig.from_env()
    _default_config = config

    root = logging.getLogger(config.root_name or "boilerplate")
    root.setLevel(_level(config.level))

    # Avoid duplicate handlers when reconfigured (e.g. in tests)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if config.console:
        root.addHandler(build_console_handler(config.level, style=config.console_style))

    if config.file_rotating and (config.log_dir and config.log_dir.strip()):
        try:
            root.addHandler(
                build_rotating_file_handler(
                    config.log_dir,
                    basename=config.log_file_basename,
                    max_bytes=config.max_bytes,
                    backup_count=config.backup_count,
                    level=config.level,
                )
            )
        except OSError:
            root.warning("Could not create log dir %s, skipping file handler", config.log_dir)

    root.propagate = False
    return root


def get_logger(name: str, config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Return a logger for the given name. If configure() was never called,
    calls configure(config or from_env()) so that the root has handlers.
    """
    if _default_config is None:
        configure(config)
    return logging.getLogger(name)


def build_rotating_file_handler(
    log_dir: str,
    basename: str = "app",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 5,
    level: str = "INFO",
) -> RotatingFileHandler:
    """Build a rotating file handler with JSON formatter; creates log_dir."""
    os.makedirs(log_dir, exist_ok=True)
    path = os.path.join(log_dir, f"{basename}.log")
    handler = RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(_level(level))
    handler.setFormatter(JsonFormatter())
    return handler


def build_console_handler(
    level: str = "INFO",
    fmt: Optional[str] = None,
    *,
    style: str = "plain",
) -> logging.StreamHandler:
    """Build a console handler; style "color" colors the level name."""
    handler = logging.StreamHandler()
    handler.setLevel(_level(level))
    if style == "color":
        handler.setFormatter(ColorConsoleFormatter(fmt=fmt))
    else:
        handler.setFormatter(PlainConsoleFormatter(fmt=fmt))
    return handler
