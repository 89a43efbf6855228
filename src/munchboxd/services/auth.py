"""Account sign-up, sign-in and session tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from munchboxd.domain.errors import AuthError, StoreError
from munchboxd.domain.models import Account, SignUpResult, normalize_username

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "Username is already taken. Try another."

SessionCallback = Callable[[Account | None], None]


class Subscription(Protocol):
    """Handle for a registered session-change callback."""

    def unsubscribe(self) -> None:
        """Stop delivering session changes."""


class AuthGateway(Protocol):
    """Interface to the hosted auth provider."""

    def current_session(self) -> Account | None:
        """Return the signed-in account, if any."""

    def sign_up(self, email: str, password: str, username: str) -> SignUpResult:
        """Create an account with the username stored as metadata."""

    def sign_in(self, email: str, password: str) -> Account:
        """Sign in with email and password."""

    def sign_out(self) -> None:
        """Invalidate the local session."""

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        """Register a callback for login, logout and token refresh."""


class UsernameLookup(Protocol):
    """Advisory username lookup against stored profiles."""

    def username_taken(self, candidate: str) -> bool:
        """Return True when a profile already uses the username."""


@dataclass
class AuthService:
    """Application service wrapping sign-up and sign-in."""

    gateway: AuthGateway
    usernames: UsernameLookup

    def sign_up(self, email: str, password: str, username: str) -> SignUpResult:
        """Register a new account after the advisory username check.

        The check runs before the provider is contacted. It is not a
        guarantee: two concurrent sign-ups can still race past it, and the
        unique constraint on ``profiles.username`` decides.
        """
        normalized = normalize_username(username)
        if not normalized:
            raise AuthError("Username is required.")
        if self._username_taken(normalized):
            raise AuthError(USERNAME_TAKEN_MESSAGE)
        return self.gateway.sign_up(email, password, normalized)

    def _username_taken(self, username: str) -> bool:
        try:
            return self.usernames.username_taken(username)
        except StoreError:
            logger.warning("Username pre-check failed, deferring to the store")
            return False

    def sign_in(self, email: str, password: str) -> Account:
        """Sign in; session-change subscribers are notified by the provider."""
        return self.gateway.sign_in(email, password)

    def sign_out(self) -> None:
        self.gateway.sign_out()

    def current_session(self) -> Account | None:
        return self.gateway.current_session()

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        return self.gateway.on_session_change(callback)
