"""Tests for configuration dataclasses, the exception envelope and the logger."""
from __future__ import annotations

import io
import logging
import os
import unittest
from unittest.mock import patch

from boilerplate.config import AppConfig, DatabaseConfig, make_async_url
from boilerplate.core.access_log import AccessLogConfig
from boilerplate.core.ansi import GREEN, RED, RESET
from boilerplate.core.exceptions import (
    ConflictError,
    NotFoundError,
    ProjectError,
    exception_factory,
)
from boilerplate.core.logger import ColorConsoleFormatter, LoggerConfig, configure


class TestAppConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = AppConfig()

        self.assertEqual(cfg.port, 8080)
        self.assertEqual(cfg.token_expires_seconds, 60)
        self.assertFalse(cfg.is_production)
        self.assertFalse(cfg.secure_transfer)

    def test_from_env(self):
        env = {
            "APP_ENV": "production",
            "PORT": "9000",
            "BASE_URL": "https://api.example.com",
            "CORS_ORIGINS": "https://a.example.com, https://b.example.com",
            "TOKEN_SECRET": "abc",
            "DB_INIT_ON_STARTUP": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = AppConfig.from_env()

        self.assertTrue(cfg.is_production)
        self.assertTrue(cfg.secure_transfer)
        self.assertEqual(cfg.port, 9000)
        self.assertEqual(cfg.cors_origins, ("https://a.example.com", "https://b.example.com"))
        self.assertEqual(cfg.token_secret, "abc")
        self.assertFalse(cfg.db_init_on_startup)

    def test_node_env_fallback(self):
        with patch.dict(os.environ, {"NODE_ENV": "production"}, clear=True):
            self.assertTrue(AppConfig.from_env().is_production)

    def test_overrides_win(self):
        with patch.dict(os.environ, {"PORT": "9000"}, clear=True):
            self.assertEqual(AppConfig.from_env(port=7000).port, 7000)

    def test_secret_hidden_from_repr(self):
        self.assertNotIn("hunter2", repr(AppConfig(token_secret="hunter2")))

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            AppConfig(port=0)
        with self.assertRaises(ValueError):
            AppConfig(token_algorithm="RS256")
        with self.assertRaises(ValueError):
            AppConfig(base_url="localhost:8080")


class TestAccessLogConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = AccessLogConfig()

        self.assertEqual(cfg.out_path, os.path.join("logs", "out.log"))
        self.assertEqual(cfg.error_path, os.path.join("logs", "error.log"))
        self.assertEqual(cfg.out_max_bytes, 1024 * 1024)

    def test_from_env(self):
        env = {
            "APP_ENV": "production",
            "ACCESS_LOG_DIR": "/var/log/app",
            "ACCESS_LOG_MAX_BYTES": "2048",
            "ACCESS_LOG_ERROR_MAX_BYTES": "4096",
            "ACCESS_LOG_CHECK_INTERVAL": "0.5",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = AccessLogConfig.from_env()

        self.assertTrue(cfg.production)
        self.assertEqual(cfg.log_dir, "/var/log/app")
        self.assertEqual(cfg.out_max_bytes, 2048)
        self.assertEqual(cfg.error_max_bytes, 4096)
        self.assertEqual(cfg.check_interval, 0.5)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            AccessLogConfig(out_file="same.log", error_file="same.log")
        with self.assertRaises(ValueError):
            AccessLogConfig(out_max_bytes=0)
        with self.assertRaises(ValueError):
            AccessLogConfig(check_interval=0)


class TestDatabaseConfig(unittest.TestCase):
    def test_make_async_url(self):
        self.assertEqual(make_async_url("postgresql://h/db"), "postgresql+asyncpg://h/db")
        self.assertEqual(make_async_url("mysql://h/db"), "mysql+aiomysql://h/db")
        self.assertEqual(make_async_url("sqlite:///x.db"), "sqlite+aiosqlite:///x.db")
        self.assertEqual(make_async_url("postgresql+psycopg://h/db"), "postgresql+psycopg://h/db")

    def test_from_env(self):
        env = {"DATABASE_URL": "mysql://u:p@h/db", "DB_POOL_SIZE": "3", "DB_ECHO": "yes"}
        with patch.dict(os.environ, env, clear=True):
            cfg = DatabaseConfig.from_env()

        self.assertEqual(cfg.async_url, "mysql+aiomysql://u:p@h/db")
        self.assertEqual(cfg.pool_size, 3)
        self.assertTrue(cfg.echo)
        self.assertFalse(cfg.is_sqlite)

    def test_rejects_unknown_scheme(self):
        with self.assertRaises(ValueError):
            DatabaseConfig(url="mongodb://h/db")


class TestProjectError(unittest.TestCase):
    def test_envelope(self):
        err = ConflictError("Email already registered", details={"email": "a@b.c"})

        self.assertEqual(err.http_status, 409)
        self.assertEqual(
            err.to_envelope(),
            {
                "code": "CONFLICT",
                "message": "Email already registered",
                "data": None,
                "details": {"email": "a@b.c"},
            },
        )

    def test_cause_only_in_log_dict(self):
        err = NotFoundError("gone", cause=KeyError("k"))

        self.assertIn("cause_traceback", err.to_dict())
        self.assertNotIn("cause", err.to_envelope())

    def test_exception_factory(self):
        QuotaError = exception_factory("QuotaError", code="QUOTA_EXCEEDED", http_status=429)
        err = QuotaError("too many")

        self.assertIsInstance(err, ProjectError)
        self.assertEqual((err.code, err.http_status), ("QUOTA_EXCEEDED", 429))


class TestLogger(unittest.TestCase):
    def test_configure_replaces_handlers(self):
        cfg = LoggerConfig(root_name="boilerplate-test", console=True, file_rotating=False)

        configure(cfg)
        root = configure(cfg)

        self.assertEqual(len(root.handlers), 1)
        self.assertFalse(root.propagate)

    def test_color_formatter_restores_levelname(self):
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "bad", None, None)

        text = ColorConsoleFormatter().format(record)

        self.assertIn(f"{RED}ERROR{RESET}", text)
        self.assertEqual(record.levelname, "ERROR")

    def test_color_console_style_from_env(self):
        with patch.dict(os.environ, {"LOG_CONSOLE_STYLE": "color"}, clear=True):
            cfg = LoggerConfig.from_env()
        root = configure(
            LoggerConfig(root_name="boilerplate-color", console_style=cfg.console_style, file_rotating=False)
        )
        stream = io.StringIO()
        root.handlers[0].setStream(stream)

        root.info("hello")

        self.assertIn(f"{GREEN}INFO{RESET}", stream.getvalue())


if __name__ == "__main__":
    unittest.main()
