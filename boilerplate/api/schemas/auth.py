"""Pydantic v2 schemas for the auth-token API."""
from __future__ import annotations

from typing import Union

from pydantic import BaseModel


class TokenRequest(BaseModel):
    id: Union[int, str]
