"""
boilerplate.infra.database – async engine, session factory, models and repositories.

Public API
──────────
  build_engine, build_session_factory, init_db, close_engine
  Base, User (models)
  BaseRepository, UserRepository
"""
from boilerplate.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    init_db,
)
from boilerplate.infra.database.models import Base, User
from boilerplate.infra.database.repositories import BaseRepository, UserRepository

__all__ = [
    "build_engine",
    "build_session_factory",
    "init_db",
    "close_engine",
    "Base",
    "User",
    "BaseRepository",
    "UserRepository",
]
