"""Pydantic v2 schemas for the Users API."""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=320, pattern=_EMAIL_PATTERN)
    bio: Optional[str] = Field(default=None, max_length=1024)


class UserPatchRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320, pattern=_EMAIL_PATTERN)
    bio: Optional[str] = Field(default=None, max_length=1024)
