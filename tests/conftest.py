from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from users_api.config import Settings
from users_api.domain.errors import StoreError
from users_api.infrastructure.database import Database
from users_api.main import create_app


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        STORE_BACKEND="sql",
        ENVIRONMENT="development",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def database(settings: Settings) -> Iterator[Database]:
    db = Database(settings.DATABASE_URL)
    assert db.ensure_schema() is True
    yield db
    db.close()


@pytest.fixture()
def client(settings: Settings, database: Database) -> Iterator[TestClient]:
    app = create_app(settings, store=database)
    with TestClient(app) as test_client:
        yield test_client


class FailingRepository:
    """Repository whose every call hits a broken store."""

    def _fail(self, *args, **kwargs):
        raise StoreError("Lost connection to MySQL server during query")

    get_by_id = list = create = update = delete = _fail


class FailingStore:
    def __init__(self, ping_error: Exception | None = None):
        self.ping_error = ping_error

    def ensure_schema(self) -> bool:
        return False

    def ping(self) -> bool:
        if self.ping_error is not None:
            raise self.ping_error
        return False

    @contextmanager
    def repository(self):
        yield FailingRepository()

    def close(self) -> None:
        pass


def create_user(client: TestClient, name: str, email: str) -> dict:
    response = client.post("/users", json={"name": name, "email": email})
    assert response.status_code == 201, response.text
    return response.json()["data"]
