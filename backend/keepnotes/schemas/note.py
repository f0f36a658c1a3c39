"""
KeepNotes Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract between clients and backend.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate OpenAPI documentation automatically.

Wire format:
    JSON keys are camelCase (backgroundColor, isArchived, reminderDate, ...).
    Python attributes stay snake_case; the alias generator maps between them.
    Both spellings are accepted on input.

Create vs. update:
    NoteCreate ignores unknown keys, so a client-supplied `owner` or `user`
    never reaches the service. NoteUpdate forbids them: the patch type lists
    exactly the five editable fields, and anything else fails deserialization
    before the note is looked up.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(CamelModel):
    """
    What:  Body of POST /api/notes.
    Why:   title and content are required and non-empty; everything else has
           a default. Lifecycle flags and owner are not client-controlled.
    """
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1, description="Note title (required)")
    content: str = Field(min_length=1, description="Note body (required)")
    tags: List[str] = Field(default_factory=list, description="Ordered text labels")
    background_color: str = Field(default="white", min_length=1)
    reminder_date: Optional[datetime] = Field(
        default=None,
        description="When the reminder becomes due (ISO 8601). Null for no reminder.",
    )

    @field_validator("reminder_date")
    @classmethod
    def normalize_reminder(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)


class NoteUpdate(CamelModel):
    """
    What:  Body of PATCH /api/notes/{id}, a partial update.

    Only keys actually present in the request are applied (see
    model_dump(exclude_unset=True) in the service). Unknown keys are a
    validation error.

    Null handling:
        reminderDate: null  → clears the reminder
        any other field: null → rejected (those columns are required)
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    background_color: Optional[str] = Field(default=None, min_length=1)
    reminder_date: Optional[datetime] = None

    @field_validator("title", "content", "tags", "background_color", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field may not be null")
        return v

    @field_validator("reminder_date")
    @classmethod
    def normalize_reminder(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(CamelModel):
    """
    What:  Full representation of a note, as stored.
    Who:   Returned by create, get, update, archive toggle and every list route.
    """
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    background_color: str
    is_archived: bool
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    owner: str = Field(description="User id of the note owner")
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Plain confirmation body, e.g. after moving a note to the trash."""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
