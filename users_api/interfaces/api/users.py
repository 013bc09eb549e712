"""Users API routes: list, read, create, update, delete."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from users_api.core.exceptions import envelope
from users_api.interfaces.deps import get_json_body, get_user_repository
from users_api.domain.repositories.user_repository import UserRepository
from users_api.domain.schemas.user import UserPayload
from users_api.application.services.user_service import (
    create_user,
    delete_user,
    dump_user,
    get_user,
    list_users,
    parse_user_id,
    update_user,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
def list_all_users(repo: UserRepository = Depends(get_user_repository)):
    users = list_users(repo)
    return envelope(
        True,
        "Users retrieved successfully",
        data=[dump_user(user) for user in users],
        total=len(users),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/{user_id}")
def read_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    user = get_user(repo, parse_user_id(user_id))
    return envelope(True, "User found", data=dump_user(user))


@router.post("", status_code=status.HTTP_201_CREATED)
def create(body: UserPayload, repo: UserRepository = Depends(get_user_repository)):
    user = create_user(repo, body)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=envelope(True, "User created successfully", data=dump_user(user)),
    )


@router.put("/{user_id}")
def update(
    user_id: str,
    body: Any = Depends(get_json_body),
    repo: UserRepository = Depends(get_user_repository),
):
    user = update_user(repo, parse_user_id(user_id), body)
    return envelope(True, "User updated successfully", data=dump_user(user))


@router.delete("/{user_id}")
def remove(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    user = delete_user(repo, parse_user_id(user_id))
    return envelope(True, "User deleted successfully", data=dump_user(user))
