from __future__ import annotations

from users_api.client import state as view
from users_api.client.render import render_page
from users_api.client.state import ViewState

HOSTILE = {"id": 7, "name": "<script>alert(\"x\")</script>", "email": "o'brien&co@example.com"}


def test_user_text_is_escaped() -> None:
    state = view.users_loaded(ViewState(), [HOSTILE], 1)

    html = render_page(state, "http://localhost:3001")

    assert "<script>alert" not in html
    assert "&lt;script&gt;alert(&#34;x&#34;)&lt;/script&gt;" in html
    assert "o&#39;brien&amp;co@example.com" in html


def test_form_values_and_pending_delete_name_are_escaped() -> None:
    listed = view.users_loaded(ViewState(), [HOSTILE], 1)
    state = view.request_delete(view.start_edit(listed, HOSTILE), HOSTILE)

    html = render_page(state, "http://localhost:3001")

    assert 'value="&lt;script&gt;' in html
    assert 'Delete user "&lt;script&gt;' in html
    assert "<script>" not in html


def test_create_mode_layout() -> None:
    html = render_page(ViewState(), "http://localhost:3001")

    assert "Create user" in html
    assert 'id="btnCancel"' not in html
    assert 'id="emptyState"' in html
    assert 'id="confirmModal"' not in html


def test_edit_mode_layout_and_field_errors() -> None:
    listed = view.users_loaded(ViewState(), [{"id": 1, "name": "Ana", "email": "ana@example.com"}], 1)
    editing = view.start_edit(listed, listed.users[0])
    rejected = view.form_rejected(editing, "Ana", "ana@example.com", {"email": "This email is already registered"}, "Email is already in use")

    html = render_page(rejected, "http://localhost:3001")

    assert "Update user" in html
    assert 'id="btnCancel"' in html
    assert "This email is already registered" in html
    assert 'id="email" name="email" value="ana@example.com" class="error"' in html
    assert 'class="message error"' in html


def test_status_indicators() -> None:
    html = render_page(view.status_checked(ViewState(), True, False), "http://localhost:3001")

    assert 'id="apiStatus" class="connected">API: Connected' in html
    assert 'id="dbStatus" class="error">Database: Error' in html
