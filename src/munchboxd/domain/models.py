"""Domain models for Munchboxd."""

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

PRODUCT_TYPES = ("Pre-roll", "Flower", "Cart", "Edible", "Dab")
SOURCE_TYPES = ("Homemade", "Fast food", "Restaurant", "Gas station", "Other")


def normalize_text(value: str | None) -> str | None:
    """Return stripped text, or None for blank input."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def normalize_rating(value: int | None) -> int | None:
    """Treat zero or missing ratings as absent."""
    return value or None


def normalize_username(value: str) -> str:
    """Lowercase a username and drop all whitespace."""
    return "".join(value.lower().split())


@dataclass(frozen=True)
class Account:
    """Authenticated account as seen by this app."""

    id: UUID
    email: str | None
    username: str | None


@dataclass(frozen=True)
class SignUpResult:
    """Outcome of a successful sign-up."""

    account: Account | None
    confirmation_required: bool


@dataclass(frozen=True)
class SessionFields:
    """User input describing a product-use session."""

    strain_name: str | None = None
    product_type: str | None = "Pre-roll"
    brand: str | None = None
    high_rating: int | None = 4

    def normalized(self) -> "SessionFields":
        return replace(
            self,
            strain_name=normalize_text(self.strain_name),
            product_type=normalize_text(self.product_type),
            brand=normalize_text(self.brand),
            high_rating=normalize_rating(self.high_rating),
        )


@dataclass(frozen=True)
class MunchieFields:
    """User input describing the food eaten afterward."""

    food_name: str | None = None
    source_type: str | None = "Homemade"
    rating: int | None = 5
    description: str | None = None

    def normalized(self) -> "MunchieFields":
        return replace(
            self,
            food_name=normalize_text(self.food_name),
            source_type=normalize_text(self.source_type),
            rating=normalize_rating(self.rating),
            description=normalize_text(self.description),
        )


@dataclass(frozen=True)
class MunchieRecord:
    """Munchie row as returned by the store after insert."""

    id: int
    session_id: int
    food_name: str | None
    source_type: str | None
    rating: int | None
    description: str | None
    created_at: datetime


@dataclass(frozen=True)
class FeedRecord:
    """A munchie flattened with its session and owner, for display only."""

    id: int
    session_id: int | None
    food_name: str | None
    rating: int | None
    description: str | None
    source_type: str | None
    created_at: datetime
    strain_name: str | None
    product_type: str | None
    user_id: UUID | None
    username: str | None
