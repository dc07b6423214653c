"""UserRepository – CRUD on the users table plus lookup by email."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select

from boilerplate.infra.database.models import User
from boilerplate.infra.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, *, exclude_id: Optional[UUID] = None) -> bool:
        """True if another user already owns ``email`` (case-insensitive)."""
        existing = await self.get_by_email(email)
        return existing is not None and existing.id != exclude_id
