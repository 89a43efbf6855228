"""Supabase repository for sessions, munchies and the feed join."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import httpx
from pydantic import BaseModel, ValidationError, field_validator
from supabase import Client, PostgrestAPIError

from munchboxd.domain.errors import StoreError
from munchboxd.domain.models import (
    FeedRecord,
    MunchieFields,
    MunchieRecord,
    SessionFields,
)
from munchboxd.services.combos import RecordStore

logger = logging.getLogger(__name__)

_FEED_SELECT = (
    "id, food_name, rating, description, source_type, created_at, session_id, "
    "sessions (strain_name, product_type, user_id, profiles (username))"
)

_STORE_ERRORS = (PostgrestAPIError, httpx.HTTPError)


class ProfileRow(BaseModel):
    """Nested ``profiles`` object of a feed row."""

    username: str | None = None


class SessionRow(BaseModel):
    """Nested ``sessions`` object of a feed row."""

    strain_name: str | None = None
    product_type: str | None = None
    user_id: UUID | None = None
    profiles: ProfileRow | None = None

    @field_validator("profiles", mode="before")
    @classmethod
    def _unwrap_profiles(cls, value: object) -> object:
        return _first_or_none(value)


class FeedRow(BaseModel):
    """Munchie row joined with its session and owner profile."""

    id: int
    food_name: str | None = None
    rating: int | None = None
    description: str | None = None
    source_type: str | None = None
    created_at: datetime
    session_id: int | None = None
    sessions: SessionRow | None = None

    @field_validator("sessions", mode="before")
    @classmethod
    def _unwrap_sessions(cls, value: object) -> object:
        return _first_or_none(value)

    def to_record(self) -> FeedRecord:
        session = self.sessions or SessionRow()
        profile = session.profiles or ProfileRow()
        return FeedRecord(
            id=self.id,
            session_id=self.session_id,
            food_name=self.food_name,
            rating=self.rating,
            description=self.description,
            source_type=self.source_type,
            created_at=self.created_at,
            strain_name=session.strain_name,
            product_type=session.product_type,
            user_id=session.user_id,
            username=profile.username,
        )


class MunchieRow(BaseModel):
    """Munchie row returned by an insert."""

    id: int
    session_id: int
    food_name: str | None = None
    source_type: str | None = None
    rating: int | None = None
    description: str | None = None
    created_at: datetime


@dataclass
class SupabaseRecordStore(RecordStore):
    """Supabase implementation for combo records."""

    client: Client

    def insert_session(self, fields: SessionFields, owner_id: UUID) -> int:
        """Create a session row and return its id."""
        fields = fields.normalized()
        try:
            response = (
                self.client.table("sessions")
                .insert(
                    {
                        "strain_name": fields.strain_name,
                        "product_type": fields.product_type,
                        "brand": fields.brand,
                        "high_rating": fields.high_rating,
                        "user_id": str(owner_id),
                    }
                )
                .execute()
            )
        except _STORE_ERRORS as exc:
            raise StoreError(f"Failed to create session: {exc}") from exc
        if not response.data:
            raise StoreError("Failed to create session")
        return int(response.data[0]["id"])

    def insert_munchie(self, session_id: int, fields: MunchieFields) -> MunchieRecord:
        """Create a munchie row for a session and return it."""
        fields = fields.normalized()
        try:
            response = (
                self.client.table("munchies")
                .insert(
                    {
                        "session_id": session_id,
                        "food_name": fields.food_name,
                        "source_type": fields.source_type,
                        "rating": fields.rating,
                        "description": fields.description,
                    }
                )
                .execute()
            )
        except _STORE_ERRORS as exc:
            raise StoreError(f"Failed to create munchie: {exc}") from exc
        if not response.data:
            raise StoreError("Failed to create munchie")
        try:
            row = MunchieRow.model_validate(response.data[0])
        except ValidationError as exc:
            raise StoreError("Malformed munchie row returned") from exc
        return MunchieRecord(
            id=row.id,
            session_id=row.session_id,
            food_name=row.food_name,
            source_type=row.source_type,
            rating=row.rating,
            description=row.description,
            created_at=row.created_at,
        )

    def load_feed(self) -> list[FeedRecord]:
        """Return all munchies with session and username, newest first."""
        try:
            response = (
                self.client.table("munchies")
                .select(_FEED_SELECT)
                .order("created_at", desc=True)
                .execute()
            )
        except _STORE_ERRORS as exc:
            raise StoreError(f"Failed to load feed: {exc}") from exc
        records = []
        for raw in response.data or []:
            try:
                records.append(FeedRow.model_validate(raw).to_record())
            except ValidationError:
                logger.warning("Skipping malformed feed row", extra={"row": raw})
        return records

    def username_taken(self, candidate: str) -> bool:
        """Return True when a profile already has the username."""
        try:
            response = (
                self.client.table("profiles")
                .select("id")
                .eq("username", candidate.lower())
                .limit(1)
                .execute()
            )
        except _STORE_ERRORS as exc:
            raise StoreError(f"Failed to check username: {exc}") from exc
        return bool(response.data)


def _first_or_none(value: object) -> object:
    if isinstance(value, list):
        return value[0] if value else None
    return value
