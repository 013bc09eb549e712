"""FastAPI application: main entry point."""

import time
import structlog
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from users_api.config import DEFAULT_API_PORT, Settings, get_settings
from users_api.core.logging import configure_logging
from users_api.core.middleware import setup_middleware
from users_api.core.exceptions import register_exception_handlers
from users_api.infrastructure.database import Database
from users_api.infrastructure.memory_store import InMemoryStore

from users_api.interfaces.api.health import router as health_router
from users_api.interfaces.api.users import router as users_router

API_VERSION = "2.0.0"

logger = structlog.get_logger(__name__)


def create_store(settings: Settings):
    """Build the store handle selected by ``STORE_BACKEND``."""
    if settings.STORE_BACKEND == "memory":
        return InMemoryStore()
    return Database(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        connect_timeout=settings.DB_CONNECT_TIMEOUT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    settings = app.state.settings
    logger.info("Starting Users API", env=settings.ENVIRONMENT, backend=settings.STORE_BACKEND)

    if not app.state.store.ensure_schema():
        logger.error("Store unavailable at startup; health will report it as disconnected")

    yield

    app.state.store.close()
    logger.info("Users API stopped")


def create_app(settings: Optional[Settings] = None, store=None) -> FastAPI:
    """Build the API around an explicitly provided store handle."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Users API",
        description="CRUD REST API for the users resource",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)
    app.state.started_at = time.monotonic()

    setup_middleware(app, settings)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(users_router)

    @app.get("/")
    def root():
        return {
            "success": True,
            "message": "Users REST API",
            "data": {
                "version": API_VERSION,
                "endpoints": {
                    "health": "GET /health",
                    "list_users": "GET /users",
                    "get_user": "GET /users/{id}",
                    "create_user": "POST /users",
                    "update_user": "PUT /users/{id}",
                    "delete_user": "DELETE /users/{id}",
                },
                "docs": "/docs",
            },
        }

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    port = settings.listen_port(DEFAULT_API_PORT)
    logger.info("Serving Users API", url=f"http://localhost:{port}", health=f"http://localhost:{port}/health")
    uvicorn.run(create_app(settings), host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
