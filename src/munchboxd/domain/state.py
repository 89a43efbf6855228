"""Explicit view state and its pure transitions.

Every transition takes a ``ViewState`` and returns a new one; nothing here
performs I/O. ``ViewStateController`` threads the value through these
functions and owns the calls to the gateways.
"""

from dataclasses import dataclass, field, fields, replace

from munchboxd.domain.models import (
    PRODUCT_TYPES,
    SOURCE_TYPES,
    Account,
    FeedRecord,
    MunchieFields,
    SessionFields,
)

TABS = ("dashboard", "new", "munchies", "feed")
AUTH_MODES = ("login", "register")
RATING_RANGE = range(1, 6)

SAVED_MESSAGE = "Session saved ✅"


@dataclass(frozen=True)
class FormOptions:
    """Choices offered by the product and source selects."""

    product_types: tuple[str, ...] = PRODUCT_TYPES
    source_types: tuple[str, ...] = SOURCE_TYPES


@dataclass(frozen=True)
class FormState:
    """Values of the combo logging form."""

    strain_name: str = ""
    product_type: str = "Pre-roll"
    brand: str = ""
    high_rating: int = 4
    food_name: str = ""
    source_type: str = "Homemade"
    munchie_rating: int = 5
    description: str = ""

    def session_fields(self) -> SessionFields:
        return SessionFields(
            strain_name=self.strain_name,
            product_type=self.product_type,
            brand=self.brand,
            high_rating=self.high_rating,
        )

    def munchie_fields(self) -> MunchieFields:
        return MunchieFields(
            food_name=self.food_name,
            source_type=self.source_type,
            rating=self.munchie_rating,
            description=self.description,
        )


@dataclass(frozen=True)
class Message:
    """Transient feedback shown under a form."""

    text: str
    is_error: bool = False


@dataclass(frozen=True)
class ViewState:
    """Everything the presentation layer needs to render a screen."""

    auth_resolved: bool = False
    account: Account | None = None
    auth_mode: str = "login"
    active_tab: str = "dashboard"
    records: tuple[FeedRecord, ...] = ()
    form: FormState = field(default_factory=FormState)
    saving: bool = False
    message: Message | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly snapshot of the state."""
        return {
            "auth_resolved": self.auth_resolved,
            "account": _serialize_account(self.account),
            "auth_mode": self.auth_mode,
            "active_tab": self.active_tab,
            "records": [serialize_record(record) for record in self.records],
            "form": {f.name: getattr(self.form, f.name) for f in fields(self.form)},
            "saving": self.saving,
            "message": (
                {"text": self.message.text, "is_error": self.message.is_error}
                if self.message
                else None
            ),
        }


def session_resolved(state: ViewState, account: Account | None) -> ViewState:
    """Mark the startup auth lookup as finished."""
    return replace(state, auth_resolved=True, account=account)


def account_changed(state: ViewState, account: Account | None) -> ViewState:
    """Apply a provider session change."""
    if account is None:
        return replace(signed_out(state), auth_resolved=True)
    return replace(state, auth_resolved=True, account=account)


def feed_loaded(state: ViewState, records: list[FeedRecord]) -> ViewState:
    """Replace the loaded records with a fresh read."""
    return replace(state, records=tuple(records))


def tab_selected(state: ViewState, tab: str) -> ViewState:
    if tab not in TABS:
        raise ValueError(f"Unknown tab: {tab}")
    return replace(state, active_tab=tab)


def auth_mode_switched(state: ViewState, mode: str) -> ViewState:
    if mode not in AUTH_MODES:
        raise ValueError(f"Unknown auth mode: {mode}")
    return replace(state, auth_mode=mode, message=None)


def form_updated(
    state: ViewState, options: FormOptions, **changes: object
) -> ViewState:
    """Apply form edits after checking names, choices and ratings."""
    known = {f.name for f in fields(FormState)}
    unknown = set(changes) - known
    if unknown:
        raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
    for name in ("high_rating", "munchie_rating"):
        if name in changes and changes[name] not in RATING_RANGE:
            raise ValueError(f"{name} must be between 1 and 5")
    if "product_type" in changes and changes["product_type"] not in (
        options.product_types
    ):
        raise ValueError(f"Unknown product type: {changes['product_type']}")
    if "source_type" in changes and changes["source_type"] not in (
        options.source_types
    ):
        raise ValueError(f"Unknown source type: {changes['source_type']}")
    return replace(state, form=replace(state.form, **changes))


def save_started(state: ViewState) -> ViewState:
    return replace(state, saving=True, message=None)


def combo_saved(state: ViewState, record: FeedRecord) -> ViewState:
    """Prepend a freshly written record and reset the form."""
    return replace(
        state,
        records=(record, *state.records),
        form=FormState(),
        saving=False,
        message=Message(SAVED_MESSAGE),
    )


def save_failed(state: ViewState, text: str) -> ViewState:
    return replace(state, saving=False, message=Message(text, is_error=True))


def message_set(
    state: ViewState, text: str | None, is_error: bool = False
) -> ViewState:
    message = Message(text, is_error=is_error) if text else None
    return replace(state, message=message)


def signed_out(state: ViewState) -> ViewState:
    """Drop the account and loaded records, back to the dashboard tab."""
    return replace(state, account=None, records=(), active_tab="dashboard")


def my_records(state: ViewState) -> tuple[FeedRecord, ...]:
    """Records owned by the current account, in feed order."""
    if state.account is None:
        return ()
    return tuple(
        record for record in state.records if record.user_id == state.account.id
    )


def serialize_record(record: FeedRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "session_id": record.session_id,
        "food_name": record.food_name,
        "rating": record.rating,
        "description": record.description,
        "source_type": record.source_type,
        "created_at": record.created_at.isoformat(),
        "strain_name": record.strain_name,
        "product_type": record.product_type,
        "user_id": str(record.user_id) if record.user_id else None,
        "username": record.username,
    }


def _serialize_account(account: Account | None) -> dict[str, object] | None:
    if account is None:
        return None
    return {
        "id": str(account.id),
        "email": account.email,
        "username": account.username,
    }
