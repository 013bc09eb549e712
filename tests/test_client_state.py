from __future__ import annotations

import dataclasses

import pytest

from users_api.client import state as view
from users_api.client.state import CREATE, EDIT, ERROR, WARNING, ViewState

USERS = [
    {"id": 2, "name": "Bia", "email": "bia@example.com"},
    {"id": 1, "name": "Ana", "email": "ana@example.com"},
]


def test_initial_state_is_create_mode() -> None:
    state = ViewState()

    assert state.mode == CREATE
    assert state.editing_id is None
    assert state.pending_delete_id is None
    assert not state.is_editing


def test_snapshots_are_immutable() -> None:
    state = view.users_loaded(ViewState(), USERS, 2)

    with pytest.raises(dataclasses.FrozenInstanceError):
        state.mode = EDIT  # type: ignore[misc]
    with pytest.raises(TypeError):
        state.users[0]["name"] = "changed"  # type: ignore[index]


def test_edit_then_cancel_returns_to_create_mode() -> None:
    listed = view.users_loaded(ViewState(), USERS, 2)

    editing = view.start_edit(listed, listed.find_user(1))
    assert editing.mode == EDIT
    assert editing.editing_id == 1
    assert (editing.form_name, editing.form_email) == ("Ana", "ana@example.com")
    assert editing.banner.kind == WARNING

    cancelled = view.cancel_edit(editing)
    assert cancelled.mode == CREATE
    assert cancelled.editing_id is None
    assert cancelled.form_name == ""
    assert cancelled.users == listed.users

    # Earlier snapshots are untouched
    assert listed.mode == CREATE
    assert editing.mode == EDIT


def test_pending_delete_is_set_and_cleared() -> None:
    listed = view.users_loaded(ViewState(), USERS, 2)

    pending = view.request_delete(listed, listed.find_user(2))
    assert pending.pending_delete_id == 2
    assert pending.pending_delete_name == "Bia"

    cleared = view.clear_pending_delete(pending)
    assert cleared.pending_delete_id is None
    assert cleared.pending_delete_name == ""


def test_rejected_form_keeps_input_and_errors() -> None:
    state = view.form_rejected(ViewState(), "A", "bad", {"name": "too short"}, "Fix it")

    assert state.form_name == "A"
    assert state.form_email == "bad"
    assert state.field_errors["name"] == "too short"
    assert state.banner == view.Banner("Fix it", ERROR)


def test_failed_load_empties_list() -> None:
    listed = view.users_loaded(ViewState(), USERS, 2)

    failed = view.users_failed(listed, "HTTP 500")

    assert failed.users == ()
    assert failed.total == 0
    assert failed.banner.kind == ERROR
    assert "HTTP 500" in failed.banner.text


def test_only_success_banners_are_dropped_after_showing() -> None:
    success = view.show_banner(ViewState(), "Saved")
    warning = view.show_banner(ViewState(), "Editing user: Ana", WARNING)

    assert view.banner_shown(success).banner is None
    assert view.banner_shown(warning) == warning
    assert view.banner_shown(ViewState()) == ViewState()
