"""
API Dependencies.
"""

import json
from typing import Any, Generator

from fastapi import Request

from users_api.application.services.user_service import MALFORMED_BODY
from users_api.domain.repositories.user_repository import UserRepository


def get_store(request: Request):
    """Store handle injected into the app by ``create_app``."""
    return request.app.state.store


def get_user_repository(request: Request) -> Generator[UserRepository, None, None]:
    """Get a user repository bound to one pooled connection for this request."""
    with get_store(request).repository() as repo:
        yield repo


async def get_json_body(request: Request) -> Any:
    """Decoded JSON body, left unvalidated so the route decides when to check it.

    ``None`` for an empty body, ``MALFORMED_BODY`` when decoding fails.
    """
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return MALFORMED_BODY
