"""
Byte-counting wrapper around the ASGI ``send`` callable.

The recorder is handed to the inner application in place of ``send``. It
forwards every message unchanged and keeps what the access log needs once
the exchange is over: final status, response headers, whether headers went
out, whether the response finished, and the number of body bytes written.
"""
from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, MutableMapping, Optional

from starlette.datastructures import Headers

Message = MutableMapping[str, Any]
Send = Callable[[Message], Awaitable[None]]

# scope["state"] key under which static file responses publish the file size
STATIC_FILE_SIZE_KEY = "static_file_size"


class ResponseRecorder:
    """
    Observe one HTTP response through its ASGI messages.

    ``bytes_written`` is the exact sum of all body chunks forwarded before the
    final body message, or None when nothing was written. Body messages that
    arrive after the response finished are forwarded but not counted.
    """

    def __init__(self, send: Send, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self._send = send
        self._clock = clock
        self._length = 0
        self.started_at: float = clock()
        self.headers_sent_at: Optional[float] = None
        self.status_code: Optional[int] = None
        self.headers = Headers()
        self.headers_sent = False
        self.finished = False

    async def __call__(self, message: Message) -> None:
        message_type = message["type"]
        already_finished = self.finished

        if message_type == "http.response.start":
            self.status_code = int(message["status"])
            self.headers = Headers(raw=list(message.get("headers") or []))

        await self._send(message)

        if message_type == "http.response.start":
            self.headers_sent = True
            self.headers_sent_at = self._clock()
        elif message_type == "http.response.body":
            if not already_finished:
                self._length += len(message.get("body") or b"")
                if not message.get("more_body", False):
                    self.finished = True
        elif message_type == "http.response.pathsend":
            self.finished = True

    @property
    def bytes_written(self) -> Optional[int]:
        return self._length or None

    def response_time_ms(self) -> Optional[float]:
        """Milliseconds between wrapping and the response headers going out."""
        if self.headers_sent_at is None:
            return None
        return (self.headers_sent_at - self.started_at) * 1000.0
