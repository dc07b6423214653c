"""Unit tests for TokenService and UploadService (no HTTP)."""
from __future__ import annotations

import asyncio
import io
import os
import shutil
import tempfile
import unittest

import jwt
from starlette.datastructures import UploadFile

from boilerplate.config import AppConfig
from boilerplate.core.exceptions import (
    ConfigurationError,
    PayloadTooLargeError,
    UnauthorizedError,
    UploadError,
    ValidationError,
)
from boilerplate.services import TokenService, UploadService
from boilerplate.services.token_service import strip_bearer
from boilerplate.services.upload_service import present, safe_filename


def _run(coro):
    return asyncio.run(coro)


def _upload(name, data=b"data"):
    return UploadFile(file=io.BytesIO(data), filename=name)


# ─── TokenService ────────────────────────────────────────────────────────────

class TestTokenService(unittest.TestCase):
    def test_issue_returns_bearer_with_claims(self):
        svc = TokenService("s3cret", expires_seconds=60, clock=lambda: 1_700_000_000)

        header = svc.issue(7)

        self.assertTrue(header.startswith("Bearer "))
        claims = jwt.decode(
            header[7:], "s3cret", algorithms=["HS256"], options={"verify_exp": False}
        )
        self.assertEqual(claims, {"id": 7, "iat": 1_700_000_000, "exp": 1_700_000_060})

    def test_verify_round_trip(self):
        svc = TokenService("s3cret")

        self.assertEqual(svc.verify(svc.issue("user-1"))["id"], "user-1")
        self.assertEqual(svc.verify(svc.encode("user-1"))["id"], "user-1")

    def test_expired_token(self):
        issuer = TokenService("s3cret", expires_seconds=60, clock=lambda: 1000)

        with self.assertRaises(UnauthorizedError) as ctx:
            TokenService("s3cret").verify(issuer.issue(1))

        self.assertEqual(ctx.exception.code, "TOKEN_EXPIRED")
        self.assertEqual(ctx.exception.http_status, 401)

    def test_wrong_secret_is_invalid(self):
        token = TokenService("one").issue(1)

        with self.assertRaises(UnauthorizedError) as ctx:
            TokenService("two").verify(token)

        self.assertEqual(ctx.exception.code, "TOKEN_INVALID")

    def test_token_without_subject_is_invalid(self):
        raw = jwt.encode({"sub": "x"}, "s3cret", algorithm="HS256")

        with self.assertRaises(UnauthorizedError) as ctx:
            TokenService("s3cret").verify(raw)

        self.assertEqual(ctx.exception.code, "TOKEN_INVALID")

    def test_empty_token(self):
        for value in ("Bearer ", "Bearer", "bearer   ", "", None):
            with self.subTest(value=value):
                with self.assertRaises(UnauthorizedError) as ctx:
                    TokenService("s3cret").verify(value)

                self.assertEqual(ctx.exception.code, "UNAUTHORIZED")

    def test_blank_subject_rejected(self):
        with self.assertRaises(ValidationError):
            TokenService("s3cret").issue("  ")
        with self.assertRaises(ValidationError):
            TokenService("s3cret").issue(None)

    def test_missing_secret(self):
        with self.assertRaises(ConfigurationError):
            TokenService.from_config(AppConfig(token_secret=None))

    def test_strip_bearer(self):
        self.assertEqual(strip_bearer("Bearer abc"), "abc")
        self.assertEqual(strip_bearer("bearer  abc "), "abc")
        self.assertEqual(strip_bearer("abc"), "abc")
        self.assertEqual(strip_bearer(""), "")
        self.assertEqual(strip_bearer("Bearer"), "")
        self.assertEqual(strip_bearer(" Bearer "), "")


# ─── UploadService ───────────────────────────────────────────────────────────

class TestUploadHelpers(unittest.TestCase):
    def test_safe_filename_drops_directories(self):
        self.assertEqual(safe_filename("../../etc/passwd"), "passwd")
        self.assertEqual(safe_filename("C:\\Users\\me\\photo.png"), "photo.png")

    def test_safe_filename_rejects_empty(self):
        for bad in (None, "", "..", "dir/"):
            with self.assertRaises(UploadError) as ctx:
                safe_filename(bad)
            self.assertEqual(ctx.exception.code, "INVALID_FILENAME")

    def test_present_skips_empty_parts(self):
        good = _upload("a.txt")

        self.assertEqual(present([good, _upload(""), None]), [good])
        self.assertEqual(present(None), [])


class TestUploadService(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp, True)
        self.svc = UploadService(os.path.join(self.tmp, "up"), max_bytes=100)

    def test_save_writes_file(self):
        stored = _run(self.svc.save(_upload("a.txt", b"hello"), field="file"))

        self.assertEqual(stored.size, 5)
        self.assertEqual(stored.field, "file")
        with open(stored.path, "rb") as fh:
            self.assertEqual(fh.read(), b"hello")
        self.assertEqual(os.listdir(self.svc.upload_dir), ["a.txt"])

    def test_save_streams_large_files_in_chunks(self):
        svc = UploadService(self.svc.upload_dir, max_bytes=1024 * 1024)
        data = os.urandom(200 * 1024)

        stored = _run(svc.save(_upload("blob.bin", data), field="file"))

        self.assertEqual(stored.size, len(data))
        with open(stored.path, "rb") as fh:
            self.assertEqual(fh.read(), data)

    def test_oversized_file_leaves_nothing_behind(self):
        with self.assertRaises(PayloadTooLargeError) as ctx:
            _run(self.svc.save(_upload("big.bin", b"x" * 101), field="file"))

        self.assertEqual(ctx.exception.code, "LIMIT_FILE_SIZE")
        self.assertEqual(ctx.exception.http_status, 413)
        self.assertEqual(os.listdir(self.svc.upload_dir), [])

    def test_concurrent_saves_of_same_name_do_not_mix(self):
        svc = UploadService(self.svc.upload_dir, max_bytes=200 * 1024)
        good = b"g" * (100 * 1024)

        async def scenario():
            return await asyncio.gather(
                svc.save(_upload("a.png", good), field="file"),
                svc.save(_upload("a.png", b"b" * (400 * 1024)), field="file"),
                return_exceptions=True,
            )

        stored, failed = _run(scenario())

        self.assertIsInstance(failed, PayloadTooLargeError)
        self.assertEqual(stored.size, len(good))
        with open(stored.path, "rb") as fh:
            self.assertEqual(fh.read(), good)
        self.assertEqual(os.listdir(svc.upload_dir), ["a.png"])

    def test_save_fields_checks_counts_before_writing(self):
        with self.assertRaises(UploadError) as ctx:
            _run(
                self.svc.save_fields(
                    {"avatar": [_upload("a.png")], "idCards": [_upload(f"{i}.jpg") for i in range(3)]},
                    max_counts={"avatar": 1, "idCards": 2},
                )
            )

        self.assertEqual(ctx.exception.code, "LIMIT_UNEXPECTED_FILE")
        self.assertFalse(os.path.exists(self.svc.upload_dir))

    def test_save_fields_without_files(self):
        with self.assertRaises(UploadError) as ctx:
            _run(self.svc.save_fields({"file": []}, max_counts={"file": 1}))

        self.assertEqual(ctx.exception.code, "NO_FILE")


if __name__ == "__main__":
    unittest.main()
