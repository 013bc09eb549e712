"""Console controller: turns user actions into API calls and view states."""

import threading
from typing import Callable, Dict, List

import structlog

from users_api.client import state as view
from users_api.client.api import ApiResponse, ApiUnavailable, UsersApiClient
from users_api.client.state import ERROR, SUCCESS, ViewState
from users_api.core.exceptions import EMAIL_CONFLICT
from users_api.domain.validation import (
    EMAIL_INVALID,
    EMAIL_REQUIRED,
    EMAIL_TOO_LONG,
    NAME_TOO_LONG,
    NAME_TOO_SHORT,
    normalize_email,
    normalize_name,
    validate_user_fields,
)

logger = structlog.get_logger(__name__)

FIX_FORM = "Please fix the errors in the form"
EMAIL_TAKEN_FIELD = "This email is already registered"
EMAIL_TAKEN_BANNER = "Email is already in use by another user"

_SERVER_FIELD_MESSAGES = {
    NAME_TOO_SHORT: "name",
    NAME_TOO_LONG: "name",
    EMAIL_REQUIRED: "email",
    EMAIL_INVALID: "email",
    EMAIL_TOO_LONG: "email",
}


def _server_field_errors(errors: List[str]) -> Dict[str, str]:
    mapped: Dict[str, str] = {}
    for message in errors:
        field = _SERVER_FIELD_MESSAGES.get(message)
        if field and field not in mapped:
            mapped[field] = message
    return mapped


def _is_duplicate_email(response: ApiResponse) -> bool:
    return response.status_code == 409 or EMAIL_CONFLICT in response.message


class UserManager:
    """Holds the current ``ViewState`` snapshot and swaps it on every action.

    Client-side validation only saves round trips; whatever the API answers
    is what the user sees.
    """

    def __init__(self, api: UsersApiClient):
        self.api = api
        self.state = ViewState()
        self._lock = threading.Lock()

    def _apply(self, transition: Callable[..., ViewState], *args, **kwargs) -> ViewState:
        with self._lock:
            self.state = transition(self.state, *args, **kwargs)
            return self.state

    def take_view(self) -> ViewState:
        """Snapshot to render; a success banner is dropped once it has been shown."""
        with self._lock:
            shown = self.state
            self.state = view.banner_shown(shown)
            return shown

    def check_api_status(self) -> ViewState:
        try:
            response = self.api.health()
        except ApiUnavailable:
            return self._apply(view.status_checked, False, False)
        data = response.data or {}
        return self._apply(view.status_checked, response.status_code == 200, bool(data.get("database_reachable")))

    def load_users(self) -> ViewState:
        try:
            response = self.api.list_users()
        except ApiUnavailable as exc:
            logger.warning("Could not load users", error=str(exc))
            return self._apply(view.users_failed, str(exc))
        if not response.ok:
            logger.warning("Could not load users", status_code=response.status_code, reason=response.message)
            return self._apply(view.users_failed, response.message)
        users = response.data or []
        return self._apply(view.users_loaded, users, response.body.get("total", len(users)))

    def submit(self, name: str, email: str) -> ViewState:
        """Create or update depending on the current mode."""
        name = normalize_name(name)
        email = normalize_email(email)

        errors = validate_user_fields(name, email)
        if errors:
            return self._apply(view.form_rejected, name, email, errors, FIX_FORM)

        editing_id = self.state.editing_id if self.state.is_editing else None
        try:
            if editing_id is not None:
                response = self.api.update_user(editing_id, name, email)
            else:
                response = self.api.create_user(name, email)
        except ApiUnavailable as exc:
            return self._apply(view.form_rejected, name, email, {}, f"Error: {exc}")

        if response.ok:
            done = "User updated successfully!" if editing_id is not None else "User created successfully!"
            self._apply(view.reset_form, view.Banner(done, SUCCESS))
            return self.load_users()

        logger.info("API refused the form", status_code=response.status_code, reason=response.message)
        if _is_duplicate_email(response):
            return self._apply(view.form_rejected, name, email, {"email": EMAIL_TAKEN_FIELD}, EMAIL_TAKEN_BANNER)
        if response.errors:
            message = f"Error: {response.message} ({'; '.join(response.errors)})"
            return self._apply(view.form_rejected, name, email, _server_field_errors(response.errors), message)
        return self._apply(view.form_rejected, name, email, {}, f"Error: {response.message}")

    def edit(self, user_id: int) -> ViewState:
        user = self.state.find_user(user_id)
        if user is None:
            return self._apply(view.show_banner, "User is no longer listed", ERROR)
        return self._apply(view.start_edit, user)

    def cancel_edit(self) -> ViewState:
        return self._apply(view.cancel_edit)

    def request_delete(self, user_id: int) -> ViewState:
        user = self.state.find_user(user_id)
        if user is None:
            return self._apply(view.show_banner, "User is no longer listed", ERROR)
        return self._apply(view.request_delete, user)

    def cancel_delete(self) -> ViewState:
        return self._apply(view.clear_pending_delete)

    def confirm_delete(self) -> ViewState:
        user_id = self.state.pending_delete_id
        if user_id is None:
            return self.state

        try:
            response = self.api.delete_user(user_id)
        except ApiUnavailable as exc:
            self._apply(view.show_banner, f"Error deleting user: {exc}", ERROR)
            return self._apply(view.clear_pending_delete)

        self._apply(view.clear_pending_delete)
        if not response.ok:
            return self._apply(view.show_banner, f"Error deleting user: {response.message}", ERROR)

        self._apply(view.show_banner, "User deleted successfully!", SUCCESS)
        return self.load_users()
