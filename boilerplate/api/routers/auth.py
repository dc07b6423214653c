"""Auth router: issue short-lived bearer tokens and echo the current subject."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from boilerplate.api.dependencies import get_current_subject, get_token_service
from boilerplate.api.limiter import limiter, login_limit
from boilerplate.api.responses import success
from boilerplate.api.schemas.auth import TokenRequest
from boilerplate.services import TokenService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token")
@limiter.limit(login_limit)
async def get_token(
    request: Request,
    body: TokenRequest,
    tokens: TokenService = Depends(get_token_service),
):
    """Return ``"Bearer <jwt>"`` for the given id, valid for TOKEN_EXPIRES_SECONDS."""
    token = tokens.issue(body.id)
    logger.info("Issued token for id=%s", body.id)
    return success(token)


@router.get("/me")
async def whoami(subject: Any = Depends(get_current_subject)):
    return success({"id": subject})
