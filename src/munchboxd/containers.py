"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from munchboxd.adapters.supabase_auth_gateway import SupabaseAuthGateway
from munchboxd.adapters.supabase_record_store import SupabaseRecordStore
from munchboxd.config import Settings
from munchboxd.services.auth import AuthService
from munchboxd.services.client_sessions import ClientSessions
from munchboxd.services.combos import ComboService
from munchboxd.services.view_state import ViewStateController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    sessions: ClientSessions
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    def build_controller() -> ViewStateController:
        # Supabase keeps the auth session on the client, so every browser
        # gets its own client and writes run under that user's row policies.
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )
        record_store = SupabaseRecordStore(supabase_client)
        auth_service = AuthService(
            gateway=SupabaseAuthGateway(supabase_client),
            usernames=record_store,
        )
        return ViewStateController(
            auth_service=auth_service,
            combo_service=ComboService(record_store),
            options=resolved_settings.form_options(),
            debug=resolved_settings.environment == "local",
        )

    sessions = ClientSessions(
        factory=build_controller, max_clients=resolved_settings.max_clients
    )

    async def close_resources() -> None:
        sessions.close()

    return AppContainer(
        settings=resolved_settings,
        sessions=sessions,
        close_resources=close_resources,
    )
