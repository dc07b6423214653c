"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate.config import AppConfig
from boilerplate.core.exceptions import ExternalServiceError
from boilerplate.services import TokenService, UploadService


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession from the app-level session factory."""
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise ExternalServiceError("Database is not configured")
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_token_service(config: AppConfig = Depends(get_app_config)) -> TokenService:
    """Raises ConfigurationError (500) when TOKEN_SECRET is unset."""
    return TokenService.from_config(config)


def get_upload_service(config: AppConfig = Depends(get_app_config)) -> UploadService:
    return UploadService.from_config(config)


def get_current_subject(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> Any:
    """The ``id`` claim of the bearer token in the Authorization header."""
    claims = tokens.verify(request.headers.get("Authorization"))
    return claims["id"]
