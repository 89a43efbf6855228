"""Two-step combo logging: a session row, then the munchie that references it."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from munchboxd.domain.errors import MunchieFailed, SessionFailed, StoreError
from munchboxd.domain.models import (
    Account,
    FeedRecord,
    MunchieFields,
    MunchieRecord,
    SessionFields,
)

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Persistence interface for sessions, munchies and the feed join."""

    def insert_session(self, fields: SessionFields, owner_id: UUID) -> int:
        """Insert a session row and return its id."""

    def insert_munchie(self, session_id: int, fields: MunchieFields) -> MunchieRecord:
        """Insert a munchie row referencing a session and return it."""

    def load_feed(self) -> list[FeedRecord]:
        """Return every munchie joined with its session and owner, newest first."""

    def username_taken(self, candidate: str) -> bool:
        """Return True when a profile already uses the username."""


@dataclass
class ComboService:
    """Orchestrates the non-atomic session-then-munchie write."""

    store: RecordStore

    def log_combo(
        self,
        session_fields: SessionFields,
        munchie_fields: MunchieFields,
        account: Account,
    ) -> FeedRecord:
        """Write a session and its munchie, then build the feed record.

        The two inserts are not wrapped in a transaction. If the munchie
        insert fails the session row stays committed and its id is carried
        on ``MunchieFailed``.
        """
        session_fields = session_fields.normalized()
        munchie_fields = munchie_fields.normalized()
        try:
            session_id = self.store.insert_session(session_fields, account.id)
        except StoreError as exc:
            raise SessionFailed("Error saving session.") from exc

        try:
            munchie = self.store.insert_munchie(session_id, munchie_fields)
        except StoreError as exc:
            logger.warning(
                "Munchie insert failed, session left without munchie",
                extra={"session_id": session_id, "user_id": str(account.id)},
            )
            raise MunchieFailed("Error saving munchie.", session_id) from exc

        return FeedRecord(
            id=munchie.id,
            session_id=munchie.session_id,
            food_name=munchie.food_name,
            rating=munchie.rating,
            description=munchie.description,
            source_type=munchie.source_type,
            created_at=munchie.created_at,
            strain_name=session_fields.strain_name,
            product_type=session_fields.product_type,
            user_id=account.id,
            username=account.username,
        )

    def load_feed(self) -> list[FeedRecord]:
        return self.store.load_feed()
