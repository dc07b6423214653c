"""
Periodic size check that truncates oversized access-log sinks.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Iterable, List, Optional

from boilerplate.core.access_log.sinks import LogSink

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class LogRotationWatchdog:
    """
    Truncate each sink to empty once its file grows past ``sink.max_bytes``.

    check_once() does one pass and is what tests drive; start() runs it every
    ``interval`` seconds on the event loop until stop(). A failed truncation
    is logged and the file left as-is; the watchdog keeps running.
    """

    def __init__(
        self,
        sinks: Iterable[LogSink],
        *,
        interval: float = 1.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._sinks = list(sinks)
        self._interval = interval
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def check_once(self) -> List[LogSink]:
        """Truncate every oversized sink; return the ones truncated."""
        truncated: List[LogSink] = []
        for sink in self._sinks:
            try:
                size = sink.size()
                if size <= sink.max_bytes:
                    continue
                sink.truncate()
            except OSError as exc:
                logger.error("Could not truncate access log %s: %s", sink.path, exc)
                continue
            logger.info(
                "Truncated access log %s (%d bytes > %d)", sink.path, size, sink.max_bytes
            )
            truncated.append(sink)
        return truncated

    async def run(self) -> None:
        while True:
            try:
                self.check_once()
            except Exception:
                logger.exception("Access log size check failed")
            await self._sleep(self._interval)

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(
                self.run(), name="access-log-rotation"
            )
        return self._task  # type: ignore[return-value]

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
