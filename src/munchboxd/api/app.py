"""FastAPI application factory."""

import logging
import secrets
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from starlette.middleware.sessions import SessionMiddleware

from munchboxd.api.requests import FormUpdate, SignInRequest, SignUpRequest
from munchboxd.api.ui import UI_HTML
from munchboxd.api.views import render_screen, render_tab
from munchboxd.app_logging import configure_logging
from munchboxd.containers import AppContainer
from munchboxd.domain.state import TABS, ViewState
from munchboxd.services.view_state import ViewStateController

CLIENT_KEY = "client_id"
SESSION_COOKIE = "munchboxd_session"


def _get_controller(request: Request) -> ViewStateController:
    """Return the controller bound to this browser's session cookie."""
    container: AppContainer = request.app.state.container
    client_id, controller = container.sessions.get(request.session.get(CLIENT_KEY))
    request.session[CLIENT_KEY] = client_id
    return controller


def _require_account(
    controller: ViewStateController = Depends(_get_controller),
) -> ViewStateController:
    if controller.state.account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return controller


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        state_container: AppContainer = app.state.container
        await state_container.close_resources()

    session_secret = container.settings.session_secret
    if not session_secret:
        logger.warning(
            "SESSION_SECRET is not set; client sessions will not survive a restart"
        )
        session_secret = secrets.token_urlsafe(32)

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        session_cookie=SESSION_COOKIE,
        https_only=container.settings.session_https_only,
    )

    def _screen(controller: ViewStateController) -> dict[str, object]:
        return render_screen(
            controller.state, controller.options, container.settings.recent_limit
        )

    def _apply(
        controller: ViewStateController, action: Callable[[], ViewState]
    ) -> dict[str, object]:
        try:
            action()
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return _screen(controller)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def screen(
        controller: ViewStateController = Depends(_get_controller),
    ) -> dict[str, object]:
        """Return the current screen."""
        return _screen(controller)

    @app.get("/state")
    async def view_state(
        controller: ViewStateController = Depends(_get_controller),
    ) -> dict[str, object]:
        """Return the raw view state."""
        return controller.state.to_dict()

    @app.get("/views/{tab}")
    async def tab_view(
        tab: str, controller: ViewStateController = Depends(_require_account)
    ) -> dict[str, object]:
        """Render a single tab without switching to it."""
        if tab not in TABS:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return render_tab(
            controller.state,
            tab,
            controller.options,
            container.settings.recent_limit,
        )

    @app.post("/tabs/{tab}")
    async def select_tab(
        tab: str, controller: ViewStateController = Depends(_get_controller)
    ) -> dict[str, object]:
        return _apply(controller, lambda: controller.select_tab(tab))

    @app.post("/auth/mode/{mode}")
    async def switch_auth_mode(
        mode: str, controller: ViewStateController = Depends(_get_controller)
    ) -> dict[str, object]:
        return _apply(controller, lambda: controller.switch_auth_mode(mode))

    @app.post("/auth/sign-up")
    async def sign_up(
        payload: SignUpRequest,
        controller: ViewStateController = Depends(_get_controller),
    ) -> dict[str, object]:
        """Create an account."""
        return _apply(
            controller,
            lambda: controller.sign_up(
                payload.email, payload.password, payload.username
            ),
        )

    @app.post("/auth/sign-in")
    async def sign_in(
        payload: SignInRequest,
        controller: ViewStateController = Depends(_get_controller),
    ) -> dict[str, object]:
        """Sign in with email and password."""
        return _apply(
            controller, lambda: controller.sign_in(payload.email, payload.password)
        )

    @app.post("/auth/sign-out")
    async def sign_out(
        request: Request,
        controller: ViewStateController = Depends(_get_controller),
    ) -> dict[str, object]:
        """Sign out and forget this browser's controller."""
        screen = _apply(controller, controller.sign_out)
        container.sessions.discard(request.session.get(CLIENT_KEY))
        request.session.clear()
        return screen

    @app.patch("/form")
    async def update_form(
        payload: FormUpdate,
        controller: ViewStateController = Depends(_get_controller),
    ) -> dict[str, object]:
        """Edit combo form fields."""
        return _apply(controller, lambda: controller.update_form(**payload.changes()))

    @app.post("/combos")
    async def log_combo(
        payload: FormUpdate | None = Body(default=None),
        controller: ViewStateController = Depends(_require_account),
    ) -> dict[str, object]:
        """Apply optional form edits, then save the session and munchie."""
        if payload is not None:
            _apply(controller, lambda: controller.update_form(**payload.changes()))
        return _apply(controller, controller.submit)

    @app.post("/feed/reload")
    async def reload_feed(
        controller: ViewStateController = Depends(_require_account),
    ) -> dict[str, object]:
        return _apply(controller, controller.load_feed)

    @app.get("/ui", response_class=HTMLResponse)
    async def ui() -> HTMLResponse:
        """Minimal page that draws the JSON screens."""
        return HTMLResponse(UI_HTML)

    return app
