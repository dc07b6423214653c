"""
Operational logger: console (plain or color) + rotating JSON file.

Usage:
    from boilerplate.core.logger import get_logger, configure, LoggerConfig

    # Configure once at startup (the app lifespan does this)
    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/boilerplate"))

    # Or from env: LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
    # LOG_CONSOLE, LOG_FILE_ROTATING, LOG_CONSOLE_STYLE
    configure()  # uses LoggerConfig.from_env()

    logger = get_logger(__name__)
    logger.info("Started")

HTTP access lines are not written here; see boilerplate.core.access_log.
"""
from boilerplate.core.logger.config import LoggerConfig
from boilerplate.core.logger.formatters import (
    ColorConsoleFormatter,
    JsonFormatter,
    PlainConsoleFormatter,
)
from boilerplate.core.logger.setup import (
    build_console_handler,
    build_rotating_file_handler,
    configure,
    get_logger,
)

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "ColorConsoleFormatter",
    "configure",
    "get_logger",
    "build_rotating_file_handler",
    "build_console_handler",
]
