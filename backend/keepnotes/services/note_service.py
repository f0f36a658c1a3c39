"""
KeepNotes Backend — Note Service (Lifecycle & Query Filtering)
================================================================

What:  Owner-scoped CRUD over notes plus the lifecycle-flag rules.
Why:   Keeps every visibility rule in one place, independent of HTTP concerns.
Who:   Called by route handlers in routes/notes.py.

Visibility rules (all scoped to owner = caller):

    ┌────────────┬─────────────┬─────────────┬────────────────────────────────┐
    │ Listing    │ is_deleted  │ is_archived │ time condition                 │
    ├────────────┼─────────────┼─────────────┼────────────────────────────────┤
    │ active     │ false       │ false       │ reminder null OR > now         │
    │ archived   │ false       │ true        │ n/a                            │
    │ trash      │ true        │ (any)       │ deleted_at >= now - retention  │
    │ reminders  │ false       │ (any)       │ reminder <= now                │
    └────────────┴─────────────┴─────────────┴────────────────────────────────┘

    get / update / soft delete / archive toggle all locate the note with the
    same predicate: id matches, owner matches, not deleted. Anything else is
    reported as not found. An id that is not a UUID cannot match a note,
    so it is not found too.

Design Decision:
    NoteService is stateless. It receives the db session and the caller's
    owner id on every call; there is no ambient "current user". Operations
    that depend on the clock take an optional `now` so the call time is
    explicit (and controllable in tests).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.config import settings
from keepnotes.exceptions import NotFoundError, StoreError, ValidationError
from keepnotes.models.note import Note
from keepnotes.schemas.note import (
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(fields: Dict[str, object]) -> None:
    """Title and content must contain something other than whitespace."""
    for name in ("title", "content"):
        value = fields.get(name)
        if isinstance(value, str) and not value.strip():
            raise ValidationError(message=f"{name} must not be blank", field=name)


def _parse_note_id(note_id: Union[str, UUID]) -> Optional[UUID]:
    if isinstance(note_id, UUID):
        return note_id
    try:
        return UUID(note_id)
    except (TypeError, ValueError):
        return None


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        SQLAlchemy failures are wrapped in StoreError (hides internal details).
        NotFoundError propagates as-is. Nothing is retried.
    """

    # ── Create ────────────────────────────────────────────────────────────

    async def create_note(
        self, db: AsyncSession, owner_id: str, data: NoteCreate
    ) -> NoteResponse:
        """
        Create a note owned by `owner_id`.

        The owner always comes from the authenticated caller. Lifecycle flags
        start cleared; timestamps are set on flush.

        Raises:
            ValidationError: Title or content is only whitespace
            StoreError: Insert failed
        """
        _require_text({"title": data.title, "content": data.content})
        note = Note(
            owner=owner_id,
            title=data.title,
            content=data.content,
            tags=list(data.tags),
            background_color=data.background_color,
            reminder_date=data.reminder_date,
            is_archived=False,
            is_deleted=False,
            deleted_at=None,
        )
        try:
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note for %s: %s", owner_id, str(e))
            raise StoreError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note %s created for owner %s", note.id, owner_id)
        return NoteResponse.model_validate(note)

    # ── Listings ──────────────────────────────────────────────────────────

    async def list_active(
        self, db: AsyncSession, owner_id: str, now: Optional[datetime] = None
    ) -> List[NoteResponse]:
        """
        Notes on the main board: not deleted, not archived, and either no
        reminder or a reminder still in the future.
        """
        now = now or _utc_now()
        query = select(Note).where(
            Note.owner == owner_id,
            Note.is_deleted.is_(False),
            Note.is_archived.is_(False),
            or_(Note.reminder_date.is_(None), Note.reminder_date > now),
        )
        return await self._fetch(db, query, "active")

    async def list_archived(
        self, db: AsyncSession, owner_id: str
    ) -> List[NoteResponse]:
        """Archived notes that are not in the trash."""
        query = select(Note).where(
            Note.owner == owner_id,
            Note.is_deleted.is_(False),
            Note.is_archived.is_(True),
        )
        return await self._fetch(db, query, "archived")

    async def list_trash(
        self, db: AsyncSession, owner_id: str, now: Optional[datetime] = None
    ) -> List[NoteResponse]:
        """
        Soft-deleted notes still inside the retention window.

        Older trashed notes are only hidden, not removed.
        """
        now = now or _utc_now()
        cutoff = now - timedelta(days=settings.trash_retention_days)
        query = select(Note).where(
            Note.owner == owner_id,
            Note.is_deleted.is_(True),
            Note.deleted_at >= cutoff,
        )
        return await self._fetch(db, query, "trash")

    async def list_reminders(
        self, db: AsyncSession, owner_id: str, now: Optional[datetime] = None
    ) -> List[NoteResponse]:
        """
        Due or overdue reminders.

        Archived notes are included: only the trash is excluded here.
        """
        now = now or _utc_now()
        query = select(Note).where(
            Note.owner == owner_id,
            Note.is_deleted.is_(False),
            Note.reminder_date <= now,
        )
        return await self._fetch(db, query, "reminders")

    # ── Single-note operations ────────────────────────────────────────────

    async def get_note(
        self, db: AsyncSession, owner_id: str, note_id: Union[str, UUID]
    ) -> NoteResponse:
        """
        Raises:
            NotFoundError: No live note with this id belongs to the caller (→ 404)
            StoreError: Query execution failed (→ 500)
        """
        note = await self._find_live_note(db, owner_id, note_id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        db: AsyncSession,
        owner_id: str,
        note_id: Union[str, UUID],
        patch: NoteUpdate,
    ) -> NoteResponse:
        """
        Apply a partial update.

        Only the keys the client actually sent are written. The patch type
        has already rejected any key outside the editable set. A title or
        content that is only whitespace is rejected here, before the lookup.
        """
        changes = patch.model_dump(exclude_unset=True)
        _require_text(changes)
        note = await self._find_live_note(db, owner_id, note_id)

        for field, value in changes.items():
            setattr(note, field, list(value) if field == "tags" else value)

        await self._flush(db, "update_note", note_id)
        logger.info("Note %s updated: %s", note_id, sorted(changes))
        return NoteResponse.model_validate(note)

    async def soft_delete(
        self,
        db: AsyncSession,
        owner_id: str,
        note_id: Union[str, UUID],
        now: Optional[datetime] = None,
    ) -> MessageResponse:
        """
        Move a note to the trash.

        A note already in the trash is not found by the lookup, so a second
        delete reports 404.
        """
        note = await self._find_live_note(db, owner_id, note_id)
        note.is_deleted = True
        note.deleted_at = now or _utc_now()

        await self._flush(db, "soft_delete", note_id)
        logger.info("Note %s moved to trash", note_id)
        return MessageResponse(message="Note deleted successfully")

    async def toggle_archive(
        self, db: AsyncSession, owner_id: str, note_id: Union[str, UUID]
    ) -> NoteResponse:
        """Flip is_archived and return the updated note."""
        note = await self._find_live_note(db, owner_id, note_id)
        note.is_archived = not note.is_archived

        await self._flush(db, "toggle_archive", note_id)
        logger.info("Note %s archived=%s", note_id, note.is_archived)
        return NoteResponse.model_validate(note)

    # ── Internals ─────────────────────────────────────────────────────────

    async def _find_live_note(
        self, db: AsyncSession, owner_id: str, note_id: Union[str, UUID]
    ) -> Note:
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        try:
            result = await db.execute(
                select(Note).where(
                    Note.id == parsed_id,
                    Note.owner == owner_id,
                    Note.is_deleted.is_(False),
                )
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise StoreError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def _fetch(self, db: AsyncSession, query, listing: str) -> List[NoteResponse]:
        try:
            result = await db.execute(query)
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing %s notes: %s", listing, str(e), exc_info=True)
            raise StoreError(
                message=f"Could not retrieve {listing} notes. Please try again.",
                context={"listing": listing, "error_type": type(e).__name__},
            )
        return [NoteResponse.model_validate(note) for note in notes]

    async def _flush(self, db: AsyncSession, operation: str, note_id: Union[str, UUID]) -> None:
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error in %s for note %s: %s", operation, note_id, str(e))
            raise StoreError(
                message="Could not save the note. Please try again.",
                context={"note_id": str(note_id), "operation": operation},
            )


# Stateless; one shared instance is enough
note_service = NoteService()
