"""
ASGI middleware writing one access-log line per completed exchange.

Usage:
    app.add_middleware(
        RequestLogMiddleware,
        log_format=AccessLogFormat.for_mode(production=False),
        router=SinkRouter.from_config(AccessLogConfig.from_env()),
    )
"""
from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from boilerplate.core.access_log.format import AccessLogFormat
from boilerplate.core.access_log.recorder import ResponseRecorder
from boilerplate.core.access_log.sinks import SinkRouter

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """
    Wrap ``send`` with a ResponseRecorder before the inner app runs and, once
    the final body message went out, format the line and route it by the
    final status. Exchanges that never finish are not logged. Nothing here
    can change or fail the response.
    """

    def __init__(self, app: ASGIApp, *, log_format: AccessLogFormat, router: SinkRouter) -> None:
        self.app = app
        self.log_format = log_format
        self.router = router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Inner routing may rewrite path fields; keep the request as received.
        scope.setdefault("state", {})
        request_scope = dict(scope)
        recorder = ResponseRecorder(send)
        try:
            await self.app(scope, receive, recorder)
        finally:
            if recorder.finished:
                self._write(Request(request_scope), recorder)
            else:
                logger.debug(
                    "No access line for unfinished %s %s", scope.get("method"), scope.get("path")
                )

    def _write(self, request: Request, recorder: ResponseRecorder) -> None:
        try:
            line = self.log_format.format(request, recorder)
            self.router.write(recorder.status_code, line)
        except Exception:
            logger.exception("Access log line dropped for %s %s", request.method, request.url.path)
