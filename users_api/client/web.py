"""Browser console for the users API."""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from users_api.client.api import UsersApiClient
from users_api.client.manager import UserManager
from users_api.client.polling import start_polling, stop_polling
from users_api.client.render import render_page
from users_api.config import Settings, get_settings
from users_api.core.logging import configure_logging
from users_api.core.middleware import RequestLoggingMiddleware

logger = structlog.get_logger(__name__)


def create_console_app(
    settings: Optional[Settings] = None,
    api: Optional[UsersApiClient] = None,
    enable_polling: bool = True,
) -> FastAPI:
    """Create the console web application around one ``UserManager``."""
    settings = settings or get_settings()
    configure_logging(settings)
    manager = UserManager(api or UsersApiClient(settings.API_URL))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        manager.check_api_status()
        manager.load_users()
        scheduler = start_polling(manager, settings) if enable_polling else None
        yield
        if scheduler is not None:
            stop_polling(scheduler)
        manager.api.close()

    app = FastAPI(title="Users Console", lifespan=lifespan)
    app.state.manager = manager
    app.add_middleware(RequestLoggingMiddleware)

    def _back(request: Request) -> RedirectResponse:
        return RedirectResponse(request.url_for("console"), status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/", response_class=HTMLResponse, name="console")
    def console():
        return HTMLResponse(render_page(manager.take_view(), settings.API_URL, settings.HEALTH_POLL_SECONDS))

    @app.post("/form", name="submit_form")
    def submit_form(request: Request, name: str = Form(""), email: str = Form("")):
        manager.submit(name, email)
        return _back(request)

    @app.post("/form/cancel", name="cancel_edit")
    def cancel_edit(request: Request):
        manager.cancel_edit()
        return _back(request)

    @app.post("/users/{user_id}/edit", name="edit_user")
    def edit_user(request: Request, user_id: int):
        manager.edit(user_id)
        return _back(request)

    @app.post("/users/{user_id}/delete", name="request_delete")
    def request_delete(request: Request, user_id: int):
        manager.request_delete(user_id)
        return _back(request)

    @app.post("/delete/confirm", name="confirm_delete")
    def confirm_delete(request: Request):
        manager.confirm_delete()
        return _back(request)

    @app.post("/delete/cancel", name="cancel_delete")
    def cancel_delete(request: Request):
        manager.cancel_delete()
        return _back(request)

    @app.post("/refresh", name="refresh")
    def refresh(request: Request):
        manager.check_api_status()
        manager.load_users()
        return _back(request)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    logger.info("Serving Users Console", port=settings.CONSOLE_PORT, api_url=settings.API_URL)
    uvicorn.run(create_console_app(settings), host="0.0.0.0", port=settings.CONSOLE_PORT)


if __name__ == "__main__":
    main()
