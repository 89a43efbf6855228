"""Controller that threads the view state through gateway calls."""

import logging
import threading
from dataclasses import dataclass, field

from munchboxd.domain import state as transitions
from munchboxd.domain.errors import AuthError, MunchieFailed, SessionFailed, StoreError
from munchboxd.domain.models import Account, FeedRecord
from munchboxd.domain.state import FormOptions, ViewState
from munchboxd.services.auth import AuthService, Subscription
from munchboxd.services.combos import ComboService

logger = logging.getLogger(__name__)

SIGN_UP_MESSAGE = (
    "Account created! If email confirmation is required, "
    "check your inbox before logging in."
)
SESSION_FAILED_MESSAGE = "Error saving session."
MUNCHIE_FAILED_MESSAGE = "Error saving munchie."
UNEXPECTED_MESSAGE = "Something went wrong."


@dataclass
class ViewStateController:
    """Holds the current ``ViewState`` and performs the I/O around it.

    The Supabase client refreshes tokens on its own thread and reports the
    result through ``handle_session_change``, so every read-then-replace of
    ``state`` happens under ``_lock``. The lock is reentrant because sign-in
    and sign-out fire the session callback on the calling thread.
    """

    auth_service: AuthService
    combo_service: ComboService
    options: FormOptions = field(default_factory=FormOptions)
    debug: bool = False
    state: ViewState = field(default_factory=ViewState)
    _subscription: Subscription | None = None
    _lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def attach(self) -> None:
        """Register the session-change callback once."""
        with self._lock:
            if self._subscription is not None:
                return
            self._subscription = self.auth_service.on_session_change(
                self.handle_session_change
            )

    def detach(self) -> None:
        """Release the session-change subscription."""
        with self._lock:
            if self._subscription is None:
                return
            self._subscription.unsubscribe()
            self._subscription = None

    @property
    def attached(self) -> bool:
        return self._subscription is not None

    def resolve_session(self) -> ViewState:
        """Run the startup auth lookup and load the feed when signed in."""
        with self._lock:
            account = self.auth_service.current_session()
            self.state = transitions.session_resolved(self.state, account)
            if account is not None:
                self.load_feed()
            return self.state

    def handle_session_change(self, account: Account | None) -> None:
        """Apply a provider session change; reload when the account differs."""
        with self._lock:
            previous = self.state.account
            self.state = transitions.account_changed(self.state, account)
            if account is not None and (
                previous is None or previous.id != account.id
            ):
                self.load_feed()

    def load_feed(self) -> ViewState:
        """Reload every record; on failure keep what was already loaded."""
        with self._lock:
            try:
                records = self.combo_service.load_feed()
            except StoreError:
                logger.exception("Feed load failed, keeping previous records")
                return self.state
            self.state = transitions.feed_loaded(self.state, records)
            return self.state

    def select_tab(self, tab: str) -> ViewState:
        with self._lock:
            self.state = transitions.tab_selected(self.state, tab)
            return self.state

    def switch_auth_mode(self, mode: str) -> ViewState:
        with self._lock:
            self.state = transitions.auth_mode_switched(self.state, mode)
            return self.state

    def update_form(self, **changes: object) -> ViewState:
        with self._lock:
            self.state = transitions.form_updated(
                self.state, self.options, **changes
            )
            return self.state

    def submit(self) -> ViewState:
        """Log the combo currently in the form."""
        with self._lock:
            return self._submit()

    def _submit(self) -> ViewState:
        account = self.state.account
        if account is None:
            self.state = transitions.save_failed(
                self.state, "Log in to save a session."
            )
            return self.state
        form = self.state.form
        self.state = transitions.save_started(self.state)
        try:
            record = self.combo_service.log_combo(
                form.session_fields(), form.munchie_fields(), account
            )
        except SessionFailed as exc:
            logger.exception("Session insert failed")
            self.state = transitions.save_failed(
                self.state, self._error_text(SESSION_FAILED_MESSAGE, exc)
            )
            return self.state
        except MunchieFailed as exc:
            logger.exception(
                "Munchie insert failed",
                extra={"orphan_session_id": exc.orphan_session_id},
            )
            self.state = transitions.save_failed(
                self.state, self._error_text(MUNCHIE_FAILED_MESSAGE, exc)
            )
            return self.state
        except Exception as exc:
            logger.exception("Unhandled error while saving combo")
            self.state = transitions.save_failed(
                self.state, self._error_text(UNEXPECTED_MESSAGE, exc)
            )
            return self.state
        self.state = transitions.combo_saved(self.state, record)
        return self.state

    def sign_up(self, email: str, password: str, username: str) -> ViewState:
        with self._lock:
            try:
                self.auth_service.sign_up(email, password, username)
            except AuthError as exc:
                self.state = transitions.message_set(
                    self.state, exc.message, is_error=True
                )
                return self.state
            self.state = transitions.message_set(self.state, SIGN_UP_MESSAGE)
            return self.state

    def sign_in(self, email: str, password: str) -> ViewState:
        """Sign in; the session-change callback swaps in the new account."""
        with self._lock:
            self.state = transitions.message_set(self.state, None)
            try:
                self.auth_service.sign_in(email, password)
            except AuthError as exc:
                self.state = transitions.message_set(
                    self.state, exc.message, is_error=True
                )
            return self.state

    def sign_out(self) -> ViewState:
        with self._lock:
            self.auth_service.sign_out()
            self.state = transitions.signed_out(self.state)
            return self.state

    def my_records(self) -> tuple[FeedRecord, ...]:
        return transitions.my_records(self.state)

    def _error_text(self, fallback: str, exc: Exception) -> str:
        """Return the user-facing error, with debug detail in local runs."""
        if self.debug:
            cause = exc.__cause__ or exc
            detail = f"{type(cause).__name__}: {cause}".strip()
            if detail:
                return f"{fallback} (debug: {detail})"
        return fallback
