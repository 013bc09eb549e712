"""Standalone demo server: the users API on a seeded in-memory store."""

import structlog

from users_api.config import DEFAULT_DEMO_PORT, get_settings
from users_api.infrastructure.memory_store import DEMO_USERS, InMemoryStore
from users_api.main import create_app

logger = structlog.get_logger(__name__)


def main() -> None:
    import uvicorn

    settings = get_settings().model_copy(update={"STORE_BACKEND": "memory"})
    port = settings.listen_port(DEFAULT_DEMO_PORT)
    app = create_app(settings, store=InMemoryStore(seed=DEMO_USERS))
    logger.info("Serving demo Users API", port=port)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
