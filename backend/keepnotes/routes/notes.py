"""
KeepNotes Backend — Notes Route Handlers
==========================================

What:  HTTP surface for the note lifecycle: create, list (four views), get,
       update, soft delete, archive toggle.
How:   Each handler resolves the caller's user id (bearer token) and a db
       session, then delegates to NoteService.

Route order matters: the fixed paths (/archived, /trash, /reminders) are
registered before /notes/{note_id} so they are never parsed as ids.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from keepnotes.database import get_db_session
from keepnotes.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from keepnotes.security import get_current_user_id
from keepnotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

_AUTH_ERRORS = {401: {"description": "Missing or invalid bearer token", "model": ErrorResponse}}
_LIST_RESPONSES = {
    **_AUTH_ERRORS,
    500: {"description": "Server error", "model": ErrorResponse},
}
_SINGLE_RESPONSES = {
    **_AUTH_ERRORS,
    404: {"description": "Note not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def _with_count(response: Response, notes: List[NoteResponse]) -> List[NoteResponse]:
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Missing title or content", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Create a note",
    description=(
        "Creates a note owned by the caller. Any owner/user value in the body "
        "is ignored; lifecycle flags always start cleared."
    ),
)
async def create_note(
    data: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db=db, owner_id=user_id, data=data)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses=_LIST_RESPONSES,
    summary="List active notes",
    description=(
        "Notes that are neither archived nor deleted, and whose reminder "
        "(if any) is still in the future."
    ),
)
async def list_active_notes(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_active(db=db, owner_id=user_id)
    return _with_count(response, notes)


@router.get(
    "/notes/archived",
    response_model=List[NoteResponse],
    responses=_LIST_RESPONSES,
    summary="List archived notes",
)
async def list_archived_notes(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_archived(db=db, owner_id=user_id)
    return _with_count(response, notes)


@router.get(
    "/notes/trash",
    response_model=List[NoteResponse],
    responses=_LIST_RESPONSES,
    summary="List notes in the trash",
    description="Soft-deleted notes, deleted within the retention window (30 days by default).",
)
async def list_trashed_notes(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_trash(db=db, owner_id=user_id)
    return _with_count(response, notes)


@router.get(
    "/notes/reminders",
    response_model=List[NoteResponse],
    responses=_LIST_RESPONSES,
    summary="List due reminders",
    description="Non-deleted notes whose reminder date has passed, archived or not.",
)
async def list_due_reminders(
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_reminders(db=db, owner_id=user_id)
    return _with_count(response, notes)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses=_SINGLE_RESPONSES,
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db=db, owner_id=user_id, note_id=note_id)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Field outside the editable set, or invalid value", "model": ErrorResponse},
        **_SINGLE_RESPONSES,
    },
    summary="Update a note",
    description=(
        "Partial update. Editable fields: title, content, tags, backgroundColor, "
        "reminderDate. Any other key rejects the whole request, whether or not "
        "the note exists."
    ),
)
async def update_note(
    note_id: str,
    patch: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(
        db=db, owner_id=user_id, note_id=note_id, patch=patch
    )


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses=_SINGLE_RESPONSES,
    summary="Move a note to the trash",
)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.soft_delete(db=db, owner_id=user_id, note_id=note_id)


@router.patch(
    "/notes/{note_id}/archive",
    response_model=NoteResponse,
    responses=_SINGLE_RESPONSES,
    summary="Toggle a note's archived state",
)
async def toggle_archive(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.toggle_archive(db=db, owner_id=user_id, note_id=note_id)
