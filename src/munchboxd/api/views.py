"""Render view models from the view state.

These functions only read the state they are given. The HTML shell at
``/ui`` draws whatever structure they return.
"""

from munchboxd.domain.models import FeedRecord
from munchboxd.domain.state import FormOptions, Message, ViewState, my_records

TITLE = "🍔 Munchboxd"

NAV_ITEMS = (
    ("dashboard", "Dashboard"),
    ("new", "Log new session"),
    ("munchies", "My munchies"),
    ("feed", "🌍 Public feed"),
)

RECENT_EMPTY = "No munchies logged yet."
MINE_EMPTY = "No munchies logged yet. Save your first session from the Dashboard tab."
FEED_EMPTY = "No munchies posted yet. Be the first!"


def render_screen(
    state: ViewState, options: FormOptions, recent_limit: int = 5
) -> dict[str, object]:
    """Gate the page on auth: loading, auth form, or the tabbed app."""
    if not state.auth_resolved:
        return {"screen": "loading", "text": "Loading…"}
    if state.account is None:
        return render_auth_screen(state)
    return {
        "screen": "app",
        "sidebar": render_sidebar(state),
        "active_tab": state.active_tab,
        "content": render_tab(state, state.active_tab, options, recent_limit),
    }


def render_auth_screen(state: ViewState) -> dict[str, object]:
    register = state.auth_mode == "register"
    fields = ["email", "password"]
    if register:
        fields.insert(0, "username")
    return {
        "screen": "auth",
        "title": TITLE,
        "tagline": "Letterboxd for munchies. Log your combos.",
        "mode": state.auth_mode,
        "fields": fields,
        "submit_label": "Create account" if register else "Log in",
        "message": _render_message(state.message),
    }


def render_sidebar(state: ViewState) -> dict[str, object]:
    account = state.account
    username = account.username if account else None
    return {
        "title": TITLE,
        "tagline": "Letterboxd for munchies.",
        "badge": {
            "initial": username[0].upper() if username else "?",
            "handle": f"@{username or 'you'}",
            "email": account.email if account else None,
        },
        "nav": [
            {"id": tab, "label": label, "active": tab == state.active_tab}
            for tab, label in NAV_ITEMS
        ],
    }


def render_tab(
    state: ViewState, tab: str, options: FormOptions, recent_limit: int = 5
) -> dict[str, object]:
    """Render one tab's content."""
    if tab == "dashboard":
        return {
            "form": render_form(state, options),
            "recent": render_recent(state, recent_limit),
        }
    if tab == "new":
        return {"form": render_form(state, options)}
    if tab == "munchies":
        return _render_list(
            "My munchies", None, my_records(state), MINE_EMPTY, show_user=False
        )
    if tab == "feed":
        return _render_list(
            "Public feed",
            "Everyone's legendary combos.",
            state.records,
            FEED_EMPTY,
            show_user=True,
        )
    raise ValueError(f"Unknown tab: {tab}")


def render_form(state: ViewState, options: FormOptions) -> dict[str, object]:
    form = state.form
    return {
        "title": "Quick log",
        "subtitle": "Save what you smoked and what you ate.",
        "values": {
            "strain_name": form.strain_name,
            "brand": form.brand,
            "food_name": form.food_name,
            "description": form.description,
            "product_type": form.product_type,
            "high_rating": form.high_rating,
            "source_type": form.source_type,
            "munchie_rating": form.munchie_rating,
        },
        "product_types": list(options.product_types),
        "source_types": list(options.source_types),
        "stars": [star <= form.munchie_rating for star in range(1, 6)],
        "submit_label": "Saving…" if state.saving else "Save session",
        "submit_disabled": state.saving,
        "message": _render_message(state.message),
    }


def render_recent(state: ViewState, limit: int = 5) -> dict[str, object]:
    mine = my_records(state)
    return {
        "title": "Recent munchies",
        "subtitle": "Your last few legendary combos.",
        "cards": [render_card(record) for record in mine[:limit]],
        "empty": RECENT_EMPTY if not mine else None,
    }


def render_card(record: FeedRecord, show_user: bool = False) -> dict[str, object]:
    """Render one feed record as a card."""
    card: dict[str, object] = {
        "id": record.id,
        "header": (
            f"{record.strain_name or 'Unknown strain'} · {record.product_type or '?'}"
        ),
        "stars": "★" * record.rating if record.rating else "",
        "food": record.food_name or "Unknown food",
        "meta": (
            f"{record.source_type or 'Unknown source'} · "
            f"{record.created_at.strftime('%Y-%m-%d %H:%M')}"
        ),
        "description": record.description,
    }
    if show_user and record.username:
        card["user"] = {
            "initial": record.username[0].upper(),
            "handle": f"@{record.username}",
        }
    return card


def _render_list(
    title: str,
    subtitle: str | None,
    records: tuple[FeedRecord, ...],
    empty_text: str,
    show_user: bool,
) -> dict[str, object]:
    return {
        "title": title,
        "subtitle": subtitle,
        "cards": [render_card(record, show_user=show_user) for record in records],
        "empty": empty_text if not records else None,
    }


def _render_message(message: Message | None) -> dict[str, object] | None:
    if message is None:
        return None
    return {"text": message.text, "is_error": message.is_error}
