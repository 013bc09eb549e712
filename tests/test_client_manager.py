from __future__ import annotations

from typing import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from users_api.client.api import ApiUnavailable, UsersApiClient
from users_api.client.manager import EMAIL_TAKEN_BANNER, EMAIL_TAKEN_FIELD, FIX_FORM, UserManager
from users_api.client.state import CREATE, EDIT, ERROR, SUCCESS, Banner
from users_api.domain.validation import EMAIL_INVALID, NAME_TOO_SHORT


@pytest.fixture()
def manager(client: TestClient) -> Iterator[UserManager]:
    yield UserManager(UsersApiClient(http=client))


def _offline_client() -> UsersApiClient:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return UsersApiClient(http=httpx.Client(base_url="http://api.invalid", transport=httpx.MockTransport(refuse)))


def _scripted_client(status_code: int, body: dict) -> UsersApiClient:
    def answer(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return UsersApiClient(http=httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(answer)))


def test_status_check_marks_api_and_database_online(manager: UserManager) -> None:
    state = manager.check_api_status()

    assert state.api_online is True
    assert state.db_online is True


def test_status_check_when_api_is_down() -> None:
    manager = UserManager(_offline_client())

    state = manager.check_api_status()

    assert state.api_online is False
    assert state.db_online is False


def test_submit_creates_and_refreshes_list(manager: UserManager) -> None:
    state = manager.submit("  Ana Lima ", " ANA@Example.com ")

    assert state.banner.kind == SUCCESS
    assert state.banner.text == "User created successfully!"
    assert state.mode == CREATE
    assert state.form_name == ""
    assert state.total == 1
    assert state.users[0]["email"] == "ana@example.com"


def test_client_validation_blocks_request(manager: UserManager, client: TestClient) -> None:
    state = manager.submit("A", "not-an-email")

    assert state.field_errors == {"name": NAME_TOO_SHORT, "email": EMAIL_INVALID}
    assert state.banner.text == FIX_FORM
    assert state.form_name == "A"
    assert client.get("/users").json()["total"] == 0


def test_duplicate_email_highlights_email_field(manager: UserManager) -> None:
    manager.submit("Ana", "ana@example.com")

    state = manager.submit("Other Ana", "ANA@example.com")

    assert state.field_errors["email"] == EMAIL_TAKEN_FIELD
    assert "name" not in state.field_errors
    assert state.banner == Banner(EMAIL_TAKEN_BANNER, ERROR)
    assert state.form_name == "Other Ana"
    assert state.total == 1


def test_edit_submits_update_and_returns_to_create(manager: UserManager) -> None:
    manager.submit("Ana", "ana@example.com")
    user_id = manager.state.users[0]["id"]

    editing = manager.edit(user_id)
    assert editing.mode == EDIT
    assert editing.form_email == "ana@example.com"

    state = manager.submit("Ana Maria", "ana.maria@example.com")

    assert state.mode == CREATE
    assert state.editing_id is None
    assert state.banner.text == "User updated successfully!"
    assert state.users[0]["name"] == "Ana Maria"
    assert state.total == 1


def test_cancel_edit_makes_no_request(manager: UserManager) -> None:
    manager.submit("Ana", "ana@example.com")
    manager.edit(manager.state.users[0]["id"])

    state = manager.cancel_edit()

    assert state.mode == CREATE
    assert state.form_name == ""
    assert state.banner.text == "Edit cancelled"


def test_delete_requires_confirmation(manager: UserManager, client: TestClient) -> None:
    manager.submit("Ana", "ana@example.com")
    user_id = manager.state.users[0]["id"]

    pending = manager.request_delete(user_id)
    assert pending.pending_delete_id == user_id
    assert client.get(f"/users/{user_id}").status_code == 200

    cancelled = manager.cancel_delete()
    assert cancelled.pending_delete_id is None
    assert client.get(f"/users/{user_id}").status_code == 200

    manager.request_delete(user_id)
    confirmed = manager.confirm_delete()
    assert confirmed.pending_delete_id is None
    assert confirmed.total == 0
    assert confirmed.banner.text == "User deleted successfully!"
    assert client.get(f"/users/{user_id}").status_code == 404


def test_failed_delete_still_clears_pending_id(client: TestClient) -> None:
    manager = UserManager(UsersApiClient(http=client))
    manager.submit("Ana", "ana@example.com")
    user_id = manager.state.users[0]["id"]
    manager.request_delete(user_id)
    client.delete(f"/users/{user_id}")

    state = manager.confirm_delete()

    assert state.pending_delete_id is None
    assert state.banner.kind == ERROR
    assert "User not found" in state.banner.text


def test_confirm_without_pending_delete_is_noop(manager: UserManager) -> None:
    before = manager.state

    assert manager.confirm_delete() is before


def test_server_validation_errors_are_surfaced() -> None:
    manager = UserManager(
        _scripted_client(
            400,
            {"success": False, "message": "Invalid data", "errors": [NAME_TOO_SHORT, EMAIL_INVALID]},
        )
    )

    state = manager.submit("Valid Name", "valid@example.com")

    assert state.field_errors == {"name": NAME_TOO_SHORT, "email": EMAIL_INVALID}
    assert state.banner.kind == ERROR
    assert "Invalid data" in state.banner.text


def test_load_users_when_api_is_down() -> None:
    manager = UserManager(_offline_client())

    state = manager.load_users()

    assert state.users == ()
    assert state.banner.kind == ERROR
    assert state.banner.text.startswith("Error loading users")


def test_api_client_wraps_transport_errors() -> None:
    with pytest.raises(ApiUnavailable):
        _offline_client().list_users()
