"""
Access-log sinks and the status-based router.

Each sink is an append-only file written through a logging.FileHandler, so
one line is one locked emit. The rotation watchdog truncates a sink under
that same lock, which keeps truncation from landing inside a line.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

from boilerplate.core.access_log.config import AccessLogConfig

logger = logging.getLogger(__name__)


class AccessLogHandler(logging.FileHandler):
    """Writes records verbatim; write failures go to the operational logger."""

    def __init__(self, path: str) -> None:
        super().__init__(path, mode="a", encoding="utf-8", delay=True)
        self.setFormatter(logging.Formatter("%(message)s"))

    def handleError(self, record: logging.LogRecord) -> None:
        logger.error("Access log write to %s failed", self.baseFilename, exc_info=True)

    def truncate(self) -> None:
        """Flush pending output and empty the file, holding the handler lock."""
        self.acquire()
        try:
            if self.stream is not None:
                self.stream.flush()
            try:
                os.truncate(self.baseFilename, 0)
            except FileNotFoundError:
                pass
        finally:
            self.release()


class LogSink:
    """One append-only access-log destination with its rotation threshold."""

    def __init__(self, name: str, path: str, *, max_bytes: int) -> None:
        self.name = name
        self.path = path
        self.max_bytes = max_bytes
        self.handler = AccessLogHandler(path)

    def write(self, line: str) -> None:
        record = logging.makeLogRecord(
            {
                "name": f"boilerplate.access.{self.name}",
                "msg": line,
                "levelno": logging.INFO,
                "levelname": "INFO",
            }
        )
        self.handler.handle(record)

    def size(self) -> int:
        try:
            return os.stat(self.path).st_size
        except FileNotFoundError:
            return 0

    def truncate(self) -> None:
        self.handler.truncate()

    def close(self) -> None:
        self.handler.close()

    def __repr__(self) -> str:
        return f"LogSink(name={self.name!r}, path={self.path!r}, max_bytes={self.max_bytes})"


class SinkRouter:
    """Route each finished exchange to the success or the error sink."""

    def __init__(self, success: LogSink, error: LogSink) -> None:
        self.success = success
        self.error = error

    @classmethod
    def from_config(cls, config: AccessLogConfig) -> "SinkRouter":
        os.makedirs(config.log_dir, exist_ok=True)
        return cls(
            LogSink("success", config.out_path, max_bytes=config.out_max_bytes),
            LogSink("error", config.error_path, max_bytes=config.error_max_bytes),
        )

    @property
    def sinks(self) -> Tuple[LogSink, LogSink]:
        return self.success, self.error

    def select(self, status_code: Optional[int]) -> LogSink:
        if status_code is not None and status_code < 400:
            return self.success
        return self.error

    def write(self, status_code: Optional[int], line: str) -> LogSink:
        sink = self.select(status_code)
        sink.write(line)
        return sink

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
