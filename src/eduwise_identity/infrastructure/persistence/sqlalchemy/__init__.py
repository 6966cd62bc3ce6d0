"""SQLAlchemy implementation for eduwise_identity persistence.

Provides:
- Base: Declarative base for identity models
- UserModel: SQLAlchemy model for users
- UserRepositorySQLAlchemy: Repository implementation for users
- create_tables / drop_tables: Schema management
"""

from eduwise_identity.infrastructure.persistence.sqlalchemy.base import (
    Base,
    TimestampMixin,
)
from eduwise_identity.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    drop_tables,
)
from eduwise_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from eduwise_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UserModel",
    "UserRepositorySQLAlchemy",
    "create_tables",
    "drop_tables",
]
