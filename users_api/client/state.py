"""Immutable view state of the console and its transitions.

Every transition returns a new ``ViewState``; nothing here performs I/O.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple

CREATE = "create"
EDIT = "edit"

SUCCESS = "success"
ERROR = "error"
WARNING = "warning"


def _frozen(mapping: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Banner:
    text: str
    kind: str = SUCCESS


@dataclass(frozen=True)
class ViewState:
    mode: str = CREATE
    editing_id: Optional[int] = None
    form_name: str = ""
    form_email: str = ""
    pending_delete_id: Optional[int] = None
    pending_delete_name: str = ""
    users: Tuple[Mapping[str, Any], ...] = ()
    total: int = 0
    field_errors: Mapping[str, str] = field(default_factory=_frozen)
    banner: Optional[Banner] = None
    api_online: Optional[bool] = None
    db_online: Optional[bool] = None

    @property
    def is_editing(self) -> bool:
        return self.mode == EDIT

    def find_user(self, user_id: int) -> Optional[Mapping[str, Any]]:
        return next((user for user in self.users if user.get("id") == user_id), None)


def show_banner(state: ViewState, text: str, kind: str = SUCCESS) -> ViewState:
    return replace(state, banner=Banner(text, kind))


def status_checked(state: ViewState, api_online: bool, db_online: bool) -> ViewState:
    return replace(state, api_online=api_online, db_online=db_online)


def users_loaded(state: ViewState, users: Sequence[Mapping[str, Any]], total: int) -> ViewState:
    return replace(state, users=tuple(MappingProxyType(dict(user)) for user in users), total=total)


def users_failed(state: ViewState, message: str) -> ViewState:
    return replace(state, users=(), total=0, banner=Banner(f"Error loading users: {message}", ERROR))


def start_edit(state: ViewState, user: Mapping[str, Any]) -> ViewState:
    return replace(
        state,
        mode=EDIT,
        editing_id=user["id"],
        form_name=user["name"],
        form_email=user["email"],
        field_errors=_frozen(),
        banner=Banner(f"Editing user: {user['name']}", WARNING),
    )


def reset_form(state: ViewState, banner: Optional[Banner] = None) -> ViewState:
    """Back to create mode with an empty form."""
    return replace(
        state,
        mode=CREATE,
        editing_id=None,
        form_name="",
        form_email="",
        field_errors=_frozen(),
        banner=banner,
    )


def cancel_edit(state: ViewState) -> ViewState:
    return reset_form(state, Banner("Edit cancelled", WARNING))


def form_rejected(
    state: ViewState,
    name: str,
    email: str,
    field_errors: Mapping[str, str],
    message: str,
) -> ViewState:
    """Keep what the user typed and show why it was refused."""
    return replace(
        state,
        form_name=name,
        form_email=email,
        field_errors=_frozen(field_errors),
        banner=Banner(message, ERROR),
    )


def request_delete(state: ViewState, user: Mapping[str, Any]) -> ViewState:
    return replace(state, pending_delete_id=user["id"], pending_delete_name=user["name"])


def clear_pending_delete(state: ViewState) -> ViewState:
    return replace(state, pending_delete_id=None, pending_delete_name="")


def banner_shown(state: ViewState) -> ViewState:
    """Success banners are shown once; errors and warnings stay until replaced."""
    if state.banner is not None and state.banner.kind == SUCCESS:
        return replace(state, banner=None)
    return state
