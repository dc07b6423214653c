"""Repositories for the boilerplate database."""
from boilerplate.infra.database.repositories.base import BaseRepository
from boilerplate.infra.database.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
