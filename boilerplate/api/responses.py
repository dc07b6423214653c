"""JSON envelope shared by every endpoint: ``{"code", "message", "data"}``."""
from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, status_code: int = 200, message: str = "ok") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message, "data": jsonable_encoder(data)},
    )
