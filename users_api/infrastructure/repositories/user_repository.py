"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Optional

from users_api.domain.models.user import User
from users_api.domain.repositories.user_repository import UserRepository
from users_api.domain.schemas.user import UserRead
from users_api.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User, UserRead], UserRepository):
    """User repository implementation using SQLAlchemy."""

    read_schema = UserRead

    def create(self, name: str, email: str) -> UserRead:
        return self._create(name=name, email=email)

    def update(self, id: int, name: str, email: str) -> Optional[UserRead]:
        return self._update(id, name=name, email=email)
