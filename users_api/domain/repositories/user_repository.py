"""
User Repository Interface.
Defines data access operations for Users.
"""

from typing import Optional

from users_api.domain.repositories.base import BaseRepository
from users_api.domain.schemas.user import UserRead


class UserRepository(BaseRepository[UserRead]):
    """Interface for User-specific operations.

    Implementations raise ``DuplicateKeyError`` when a write collides with an
    existing email and ``StoreError`` for any other store fault.
    """

    def create(self, name: str, email: str) -> UserRead:
        """Insert a user; the store assigns id and timestamps."""
        ...

    def update(self, id: int, name: str, email: str) -> Optional[UserRead]:
        """Overwrite name and email. Returns None if the row does not exist."""
        ...
