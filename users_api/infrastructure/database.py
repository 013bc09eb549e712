"""Database engine, pooled sessions and the startup schema check."""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

import structlog
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from users_api.domain.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)

Base = declarative_base()


def _engine_options(url: str, pool_size: int, pool_timeout: int, connect_timeout: int) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            # One shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
        return options

    options = {
        "pool_size": pool_size,
        "max_overflow": 0,
        "pool_timeout": pool_timeout,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }
    if url.startswith(("mysql", "postgresql")):
        options["connect_args"] = {"connect_timeout": connect_timeout}
    return options


class Database:
    """Store handle backed by a bounded SQLAlchemy connection pool."""

    def __init__(
        self,
        url: str,
        pool_size: int = 10,
        pool_timeout: int = 60,
        connect_timeout: int = 60,
        echo: bool = False,
    ):
        self.url = url
        self.engine = create_engine(
            url,
            echo=echo,
            **_engine_options(url, pool_size, pool_timeout, connect_timeout),
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def ensure_schema(self) -> bool:
        """Verify the users table exists, creating it when missing.

        Returns False when the store cannot be reached so the API can
        still start and report the database as disconnected.
        """
        # Registers the users table on Base.metadata
        from users_api.domain.models.user import User

        try:
            if inspect(self.engine).has_table(User.__tablename__):
                logger.info("Database schema verified", table=User.__tablename__)
            else:
                logger.warning("Table not found, creating it", table=User.__tablename__)
                Base.metadata.create_all(bind=self.engine, tables=[User.__table__])
                logger.info("Table created", table=User.__tablename__)
            return True
        except SQLAlchemyError as exc:
            logger.error("Database schema check failed", error=str(exc))
            return False

    def ping(self) -> bool:
        """Return whether the store answers a trivial query. Never raises."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning("Database ping failed", error=str(exc))
            return False

    def session(self) -> Session:
        return self.SessionLocal()

    @contextmanager
    def repository(self) -> Iterator["UserRepository"]:
        from users_api.domain.models.user import User
        from users_api.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

        db = self.session()
        try:
            yield SQLAlchemyUserRepository(db, User)
        finally:
            db.close()

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")
