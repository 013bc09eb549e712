"""In-memory user store used by the demo server and as a test double."""

import itertools
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import structlog

from users_api.domain.errors import DuplicateKeyError
from users_api.domain.repositories.user_repository import UserRepository
from users_api.domain.schemas.user import UserRead

logger = structlog.get_logger(__name__)

DEMO_USERS: Tuple[Tuple[str, str], ...] = (
    ("Erik", "erik@example.com"),
    ("Debora", "debora@example.com"),
    ("Eike", "eike@example.com"),
    ("Julia", "julia@example.com"),
)


class InMemoryUserRepository(UserRepository):
    """Dict-backed repository sharing its rows and lock with the owning store."""

    def __init__(self, rows: Dict[int, UserRead], lock: threading.Lock, next_id: Iterator[int]):
        self._rows = rows
        self._lock = lock
        self._next_id = next_id

    def _email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        return any(row.email == email and row.id != exclude_id for row in self._rows.values())

    def get_by_id(self, id: int) -> Optional[UserRead]:
        with self._lock:
            return self._rows.get(id)

    def list(self) -> List[UserRead]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda row: row.id, reverse=True)

    def create(self, name: str, email: str) -> UserRead:
        with self._lock:
            if self._email_taken(email):
                raise DuplicateKeyError(f"Duplicate entry '{email}' for key 'email'")
            now = datetime.now()
            user = UserRead(id=next(self._next_id), name=name, email=email, created_at=now, updated_at=now)
            self._rows[user.id] = user
            return user

    def update(self, id: int, name: str, email: str) -> Optional[UserRead]:
        with self._lock:
            current = self._rows.get(id)
            if current is None:
                return None
            if self._email_taken(email, exclude_id=id):
                raise DuplicateKeyError(f"Duplicate entry '{email}' for key 'email'")
            updated = current.model_copy(update={"name": name, "email": email, "updated_at": datetime.now()})
            self._rows[id] = updated
            return updated

    def delete(self, id: int) -> Optional[UserRead]:
        with self._lock:
            return self._rows.pop(id, None)


class InMemoryStore:
    """Store handle with the same surface as ``Database`` but no persistence."""

    def __init__(self, seed: Iterable[Tuple[str, str]] = ()):
        self._rows: Dict[int, UserRead] = {}
        self._lock = threading.Lock()
        self._next_id = itertools.count(1)
        repo = self._repository()
        for name, email in seed:
            repo.create(name, email)

    def _repository(self) -> InMemoryUserRepository:
        return InMemoryUserRepository(self._rows, self._lock, self._next_id)

    def ensure_schema(self) -> bool:
        logger.info("Using in-memory user store", users=len(self._rows))
        return True

    def ping(self) -> bool:
        return True

    @contextmanager
    def repository(self) -> Iterator[UserRepository]:
        yield self._repository()

    def close(self) -> None:
        with self._lock:
            self._rows.clear()
