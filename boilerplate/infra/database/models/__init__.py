"""
boilerplate.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from boilerplate.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from boilerplate.infra.database.models.user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "User",
]
