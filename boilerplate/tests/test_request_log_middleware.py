"""End-to-end tests for RequestLogMiddleware on a minimal Starlette app.

Covers:
- one line per finished exchange, routed by final status
- streamed bodies counted chunk by chunk
- unfinished exchanges (app raised before responding) leave no line
- a failing token or sink never breaks the response
"""
from __future__ import annotations

import os
import shutil
import tempfile
import unittest
from datetime import datetime
from unittest.mock import patch

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse, StreamingResponse
from fastapi.testclient import TestClient

from boilerplate.core.access_log import (
    AccessLogConfig,
    AccessLogFormat,
    RequestLogMiddleware,
    SinkRouter,
    default_registry,
)


def _lines(path):
    if not os.path.exists(path):
        return []
    with open(path, encoding="utf-8") as fh:
        return fh.read().splitlines()


def _make_test_app(router, template=":method :url :status :bytes-sent :transfer-state"):
    app = FastAPI()

    @app.get("/ok")
    async def ok():
        return PlainTextResponse("x" * 2048)

    @app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="nope")

    @app.get("/redirect")
    async def redirect():
        return PlainTextResponse("", status_code=302, headers={"Location": "/ok"})

    @app.get("/stream")
    async def stream():
        async def chunks():
            yield b"a" * 512
            yield b"b" * 512

        return StreamingResponse(chunks(), media_type="text/plain")

    @app.get("/crash")
    async def crash():
        raise RuntimeError("handler blew up")

    registry = default_registry(now=lambda: datetime(2024, 5, 6, 7, 8, 9))
    app.add_middleware(
        RequestLogMiddleware,
        log_format=AccessLogFormat(template, registry),
        router=router,
    )
    return app


class TestRequestLogMiddleware(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp, True)
        self.config = AccessLogConfig(log_dir=self.tmp)
        self.router = SinkRouter.from_config(self.config)
        self.addCleanup(self.router.close)
        self.client = TestClient(_make_test_app(self.router), raise_server_exceptions=False)

    def test_success_goes_to_out_log(self):
        resp = self.client.get("/ok?x=1")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(_lines(self.config.out_path), ["GET /ok?x=1 200 2.00KB COMPLETE"])
        self.assertEqual(_lines(self.config.error_path), [])

    def test_redirect_is_success(self):
        self.client.get("/redirect", follow_redirects=False)

        self.assertEqual(len(_lines(self.config.out_path)), 1)
        self.assertIn(" 302 ", _lines(self.config.out_path)[0])

    def test_client_error_goes_to_error_log(self):
        resp = self.client.get("/missing")

        self.assertEqual(resp.status_code, 404)
        self.assertEqual(_lines(self.config.out_path), [])
        [line] = _lines(self.config.error_path)
        self.assertTrue(line.startswith("GET /missing 404 "), line)
        self.assertTrue(line.endswith(" COMPLETE"), line)

    def test_unknown_route_goes_to_error_log(self):
        self.client.get("/does-not-exist")

        self.assertEqual(len(_lines(self.config.error_path)), 1)

    def test_streamed_body_counted(self):
        resp = self.client.get("/stream")

        self.assertEqual(len(resp.content), 1024)
        self.assertEqual(_lines(self.config.out_path), ["GET /stream 200 1.00KB COMPLETE"])

    def test_unfinished_exchange_is_not_logged(self):
        resp = self.client.get("/crash")

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(_lines(self.config.out_path), [])
        self.assertEqual(_lines(self.config.error_path), [])

    def test_one_line_per_exchange(self):
        for _ in range(3):
            self.client.get("/ok")
        self.client.get("/missing")

        self.assertEqual(len(_lines(self.config.out_path)), 3)
        self.assertEqual(len(_lines(self.config.error_path)), 1)

    def test_failing_token_renders_dash(self):
        registry = default_registry()

        @registry.register("explode")
        def explode(request, response):
            raise ValueError("bad token")

        app = FastAPI()
        app.add_api_route("/ok", lambda: PlainTextResponse("fine"))
        app.add_middleware(
            RequestLogMiddleware,
            log_format=AccessLogFormat(":status :explode", registry),
            router=self.router,
        )
        resp = TestClient(app).get("/ok")

        self.assertEqual(resp.text, "fine")
        self.assertEqual(_lines(self.config.out_path), ["200 -"])

    def test_sink_failure_does_not_break_response(self):
        with patch.object(self.router, "write", side_effect=OSError("disk full")):
            with self.assertLogs("boilerplate.core.access_log.middleware", level="ERROR"):
                resp = self.client.get("/ok")

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.content), 2048)

    def test_production_template(self):
        client = TestClient(
            _make_test_app(self.router, AccessLogFormat.for_mode(True).template)
        )
        client.get("/ok")

        [line] = _lines(self.config.out_path)
        self.assertTrue(line.startswith("2024-05-06 07:08:09 GET /ok "), line)
        self.assertIn(" 2.00KB COMPLETE - ", line)


if __name__ == "__main__":
    unittest.main()
