"""User service: validation and CRUD rules for the users resource."""

from typing import Any, List

import structlog

from users_api.core.exceptions import (
    INVALID_ID,
    EntityNotFoundException,
    ValidationException,
)
from users_api.domain.repositories.user_repository import UserRepository
from users_api.domain.schemas.user import UserPayload, UserRead
from users_api.domain.validation import normalize_email, normalize_name, validate_user_fields

logger = structlog.get_logger(__name__)

# Largest value the ``users.id`` INTEGER column can hold.
MAX_USER_ID = 2**31 - 1

BODY_NOT_OBJECT = "Request body must be a JSON object"
BODY_MALFORMED = "Request body is not valid JSON"
MALFORMED_BODY = object()


def parse_user_id(raw: str) -> int:
    """Accept only a plain positive decimal id."""
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise ValidationException(INVALID_ID)
    return int(raw)


def parse_payload(body: Any) -> UserPayload:
    """Turn a decoded request body into a ``UserPayload``.

    ``body`` is ``None`` when nothing was sent and ``MALFORMED_BODY`` when
    the bytes did not decode as JSON.
    """
    if body is MALFORMED_BODY:
        raise ValidationException(errors=[BODY_MALFORMED])
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ValidationException(errors=[BODY_NOT_OBJECT])
    return UserPayload.model_validate(body)


def clean_payload(payload: UserPayload) -> tuple[str, str]:
    """Validate and normalize a create/update body, reporting every violation."""
    errors = validate_user_fields(payload.name, payload.email)
    if errors:
        raise ValidationException(errors=list(errors.values()))
    return normalize_name(payload.name), normalize_email(payload.email)


def list_users(repo: UserRepository) -> List[UserRead]:
    """Get every user, newest first."""
    return repo.list()


def get_user(repo: UserRepository, user_id: int) -> UserRead:
    # No row can carry an id the column cannot store.
    user = repo.get_by_id(user_id) if user_id <= MAX_USER_ID else None
    if user is None:
        raise EntityNotFoundException()
    return user


def create_user(repo: UserRepository, payload: UserPayload) -> UserRead:
    name, email = clean_payload(payload)
    user = repo.create(name, email)
    logger.info("User created", user_id=user.id)
    return user


def update_user(repo: UserRepository, user_id: int, body: Any) -> UserRead:
    """Replace name and email of an existing user.

    Existence is checked before the body is even parsed so an unknown id is
    always reported as not found.
    """
    get_user(repo, user_id)
    name, email = clean_payload(parse_payload(body))
    user = repo.update(user_id, name, email)
    if user is None:
        raise EntityNotFoundException()
    logger.info("User updated", user_id=user_id)
    return user


def delete_user(repo: UserRepository, user_id: int) -> UserRead:
    """Hard delete, returning the row as it was."""
    user = repo.delete(user_id) if user_id <= MAX_USER_ID else None
    if user is None:
        raise EntityNotFoundException()
    logger.info("User deleted", user_id=user_id)
    return user


def dump_user(user: UserRead) -> dict[str, Any]:
    return user.model_dump(mode="json")
