"""
Boilerplate config: load from env.

Load from env: load_app_config(), load_database_config().
Access-log settings live in boilerplate.core.access_log.AccessLogConfig.
"""
from boilerplate.config.app import AppConfig, load_app_config, load_env_file
from boilerplate.config.database import DatabaseConfig, load_database_config, make_async_url

__all__ = [
    "AppConfig",
    "load_app_config",
    "load_env_file",
    "DatabaseConfig",
    "load_database_config",
    "make_async_url",
]
