"""Users router: CRUD passthrough over the users table."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate.api.dependencies import get_current_subject, get_session
from boilerplate.api.responses import success
from boilerplate.api.schemas.users import UserCreateRequest, UserPatchRequest, UserResponse
from boilerplate.core.exceptions import ConflictError, NotFoundError, ValidationError
from boilerplate.infra.database.repositories import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


def _to_schema(user) -> UserResponse:
    return UserResponse.model_validate(user)


async def _get_or_404(repo: UserRepository, user_id: UUID):
    user = await repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found", details={"id": str(user_id)})
    return user


def _email_conflict(email: str) -> ConflictError:
    return ConflictError("Email already registered", details={"email": email})


@router.get("")
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
):
    repo = UserRepository(session)
    users = await repo.get_all(skip=skip, limit=limit)
    total = await repo.count()
    return success({"items": [_to_schema(u) for u in users], "total": total})


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_session),
):
    user = await _get_or_404(UserRepository(session), user_id)
    return success(_to_schema(user))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreateRequest,
    session: AsyncSession = Depends(get_session),
    subject: Any = Depends(get_current_subject),
):
    repo = UserRepository(session)
    if await repo.email_taken(body.email):
        raise _email_conflict(body.email)
    try:
        user = await repo.create(body.model_dump())
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise _email_conflict(body.email) from exc
    logger.info("User %s created by subject %s", user.id, subject)
    return success(_to_schema(user), status.HTTP_201_CREATED, "created")


@router.patch("/{user_id}")
async def patch_user(
    user_id: UUID,
    body: UserPatchRequest,
    session: AsyncSession = Depends(get_session),
    subject: Any = Depends(get_current_subject),
):
    update_data = body.model_dump(exclude_none=True)
    if not update_data:
        raise ValidationError("No fields to update")
    repo = UserRepository(session)
    await _get_or_404(repo, user_id)
    email = update_data.get("email")
    if email is not None and await repo.email_taken(email, exclude_id=user_id):
        raise _email_conflict(email)
    try:
        user = await repo.update(user_id, update_data)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise _email_conflict(email or "") from exc
    logger.info("User %s updated by subject %s", user_id, subject)
    return success(_to_schema(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    session: AsyncSession = Depends(get_session),
    subject: Any = Depends(get_current_subject),
):
    deleted = await UserRepository(session).delete(user_id)
    if not deleted:
        raise NotFoundError("User not found", details={"id": str(user_id)})
    await session.commit()
    logger.info("User %s deleted by subject %s", user_id, subject)
    return success(None, status.HTTP_200_OK, "deleted")
