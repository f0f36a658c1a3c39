"""
KeepNotes Backend — Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: Non-sequential, so ids can't be enumerated across users
    - owner_id: Opaque user id from the identity provider's `sub` claim.
      There is no users table here; identities live with the auth service.
    - tags: JSON array so ordering is preserved and the column works on both
      PostgreSQL and SQLite
    - is_archived / is_deleted: Independent flags, not a status enum. A note
      can be archived and deleted at the same time.
    - deleted_at: Non-null exactly when is_deleted is true
    - All timestamps are UTC with timezone

Indexes:
    Every query is scoped by owner_id first, then by lifecycle flags or
    reminder_date, so both composite indexes lead with owner_id.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from keepnotes.database import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user's note.

    Lifecycle:
        1. Created active (not archived, not deleted)
        2. Archive toggled any number of times
        3. Soft-deleted: is_deleted=True, deleted_at=now. Irreversible via the API.
        4. Drops out of the trash listing once deleted_at is older than the
           retention window. The row itself is kept.
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Set once from the authenticated caller; never written again
    owner: Mapped[str] = mapped_column(
        "owner_id",
        String(128),
        nullable=False,
        comment="Identity provider user id of the note owner",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    tags: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    background_color: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="white",
        server_default=text("'white'"),
    )

    # ── Lifecycle Flags ───────────────────────────────────────────────────
    is_archived: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        comment="When the note was moved to the trash (UTC)",
    )

    reminder_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint(
            "(is_deleted AND deleted_at IS NOT NULL) OR (NOT is_deleted AND deleted_at IS NULL)",
            name="ck_notes_deleted_at_matches_flag",
        ),
        Index("idx_notes_owner_flags", "owner_id", "is_deleted", "is_archived"),
        Index("idx_notes_owner_reminder", "owner_id", "reminder_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, owner='{self.owner}', "
            f"archived={self.is_archived}, deleted={self.is_deleted})>"
        )
