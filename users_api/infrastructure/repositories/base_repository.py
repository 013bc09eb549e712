"""
SQLAlchemy implementation of the Base Repository.
"""

from contextlib import contextmanager
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from users_api.domain.errors import DuplicateKeyError, StoreError
from users_api.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)
SchemaType = TypeVar("SchemaType", bound=BaseModel)

MYSQL_DUPLICATE_ENTRY = 1062
POSTGRES_UNIQUE_VIOLATION = "23505"


def is_duplicate_key(exc: IntegrityError) -> bool:
    """Tell a unique-constraint violation apart from other integrity errors."""
    orig = exc.orig
    if getattr(orig, "pgcode", None) == POSTGRES_UNIQUE_VIOLATION:
        return True
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return True
    message = str(orig).lower()
    return "unique constraint failed" in message or "duplicate entry" in message


class SQLAlchemyRepository(Generic[ModelType, SchemaType]):
    """Generic repository implementation for SQLAlchemy models.

    Rows leave the repository as ``read_schema`` instances so callers never
    hold live ORM objects after the session closes.
    """

    read_schema: Type[SchemaType]

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _to_schema(self, obj: Optional[ModelType]) -> Optional[SchemaType]:
        if obj is None:
            return None
        return self.read_schema.model_validate(obj)

    @contextmanager
    def _guard(self) -> Iterator[None]:
        """Translate driver errors into store faults, rolling back first."""
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            if is_duplicate_key(exc):
                raise DuplicateKeyError(str(exc.orig)) from exc
            raise StoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(str(exc)) from exc

    def get_by_id(self, id: int) -> Optional[SchemaType]:
        with self._guard():
            return self._to_schema(self.db.get(self.model, id))

    def list(self) -> List[SchemaType]:
        with self._guard():
            rows = self.db.scalars(select(self.model).order_by(self.model.id.desc())).all()
            return [self._to_schema(row) for row in rows]

    def _create(self, **values: Any) -> SchemaType:
        with self._guard():
            db_obj = self.model(**values)
            self.db.add(db_obj)
            self.db.commit()
            self.db.refresh(db_obj)
            return self._to_schema(db_obj)

    def _update(self, id: int, **values: Any) -> Optional[SchemaType]:
        with self._guard():
            db_obj = self.db.get(self.model, id)
            if db_obj is None:
                return None
            for field, value in values.items():
                setattr(db_obj, field, value)
            self.db.commit()
            self.db.refresh(db_obj)
            return self._to_schema(db_obj)

    def delete(self, id: int) -> Optional[SchemaType]:
        with self._guard():
            db_obj = self.db.get(self.model, id)
            if db_obj is None:
                return None
            snapshot = self._to_schema(db_obj)
            self.db.delete(db_obj)
            self.db.commit()
            return snapshot
