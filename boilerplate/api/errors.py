"""Exception handlers mapping errors onto the response envelope."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from boilerplate.core.exceptions import ProjectError, RateLimitError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


async def project_error_handler(request: Request, exc: ProjectError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.to_dict())
    return JSONResponse(status_code=exc.http_status, content=exc.to_envelope())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": f"HTTP_{exc.status_code}", "message": str(exc.detail), "data": None},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Invalid request parameters",
            "data": None,
            "details": jsonable_encoder(exc.errors()),
        },
    )


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Must stay sync: SlowAPIMiddleware calls the registered handler without awaiting it."""
    limited = _rate_limit_exceeded_handler(request, exc)
    error = RateLimitError(f"Too many requests, limit is {exc.detail}")
    headers = {
        k: v for k, v in limited.headers.items()
        if k.lower().startswith("x-ratelimit") or k.lower() == "retry-after"
    }
    return JSONResponse(status_code=429, content=error.to_envelope(), headers=headers)


async def unhandled_error_middleware(request: Request, call_next):
    """Turn unexpected exceptions into a 500 envelope inside the access-log middleware."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"code": "INTERNAL_ERROR", "message": INTERNAL_ERROR_MESSAGE, "data": None},
        )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(ProjectError, project_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
