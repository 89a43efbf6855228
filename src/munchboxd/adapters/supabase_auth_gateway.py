"""Supabase-backed auth gateway."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError as SupabaseAuthError
from supabase import Client

from munchboxd.domain.errors import AuthError
from munchboxd.domain.models import Account, SignUpResult
from munchboxd.services.auth import AuthGateway, SessionCallback, Subscription

logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Supabase implementation of the auth provider boundary."""

    client: Client

    def current_session(self) -> Account | None:
        """Return the account for the stored session, if any."""
        try:
            session = self.client.auth.get_session()
        except SupabaseAuthError:
            logger.exception("Failed to read the current auth session")
            return None
        if session is None or session.user is None:
            return None
        return _to_account(session.user)

    def sign_up(self, email: str, password: str, username: str) -> SignUpResult:
        """Create an account; username is kept in the user metadata."""
        try:
            response = self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"username": username}},
                }
            )
        except SupabaseAuthError as exc:
            raise AuthError(exc.message) from exc
        account = _to_account(response.user) if response.user else None
        return SignUpResult(
            account=account,
            confirmation_required=response.session is None,
        )

    def sign_in(self, email: str, password: str) -> Account:
        """Sign in with a password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except SupabaseAuthError as exc:
            raise AuthError(exc.message) from exc
        if response.user is None:
            raise AuthError("Sign in failed")
        return _to_account(response.user)

    def sign_out(self) -> None:
        """Sign out locally; provider errors are logged only."""
        try:
            self.client.auth.sign_out()
        except SupabaseAuthError:
            logger.warning("Sign out failed at the provider", exc_info=True)

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        """Forward provider auth events as account changes."""

        def _listener(_event: object, session: object | None) -> None:
            user = getattr(session, "user", None)
            callback(_to_account(user) if user else None)

        return self.client.auth.on_auth_state_change(_listener)


def _to_account(user: object) -> Account:
    metadata = getattr(user, "user_metadata", None) or {}
    return Account(
        id=UUID(str(user.id)),
        email=getattr(user, "email", None),
        username=metadata.get("username"),
    )
