"""Tests for screen rendering."""

from datetime import UTC, datetime

from munchboxd.api.views import render_card, render_screen
from munchboxd.domain import state as transitions
from munchboxd.domain.models import FeedRecord
from munchboxd.domain.state import FormOptions, ViewState


def _record(record_id: int, user_id, username: str | None = None) -> FeedRecord:
    return FeedRecord(
        id=record_id,
        session_id=record_id,
        food_name=None,
        rating=None,
        description=None,
        source_type=None,
        created_at=datetime(2024, 4, 20, 16, 20, tzinfo=UTC),
        strain_name=None,
        product_type=None,
        user_id=user_id,
        username=username,
    )


def test_card_falls_back_for_missing_fields() -> None:
    card = render_card(_record(1, None))

    assert card["header"] == "Unknown strain · ?"
    assert card["food"] == "Unknown food"
    assert card["meta"] == "Unknown source · 2024-04-20 16:20"
    assert card["stars"] == ""
    assert "user" not in card


def test_feed_card_shows_username() -> None:
    card = render_card(_record(1, None, username="stoner_a"), show_user=True)

    assert card["user"] == {"initial": "S", "handle": "@stoner_a"}


def test_register_mode_asks_for_username() -> None:
    state = transitions.auth_mode_switched(
        transitions.session_resolved(ViewState(), None), "register"
    )

    screen = render_screen(state, FormOptions())

    assert screen["fields"] == ["username", "email", "password"]
    assert screen["submit_label"] == "Create account"


def test_recent_shows_only_own_records_up_to_limit(account) -> None:
    records = [_record(i, account.id) for i in range(7)] + [_record(99, None)]
    state = transitions.feed_loaded(
        transitions.session_resolved(ViewState(), account), records
    )

    screen = render_screen(state, FormOptions(), recent_limit=5)

    cards = screen["content"]["recent"]["cards"]
    assert [card["id"] for card in cards] == [0, 1, 2, 3, 4]
    assert screen["sidebar"]["nav"][0] == {
        "id": "dashboard",
        "label": "Dashboard",
        "active": True,
    }


def test_saving_disables_submit(account) -> None:
    state = transitions.save_started(transitions.session_resolved(ViewState(), account))

    form = render_screen(state, FormOptions())["content"]["form"]

    assert form["submit_label"] == "Saving…"
    assert form["submit_disabled"]
