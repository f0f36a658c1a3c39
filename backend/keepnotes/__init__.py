"""
KeepNotes Backend — Application Package Initializer
===================================================

What: Marks the `keepnotes` directory as a Python package.
Who:  Used by Alembic, pytest, and uvicorn (uvicorn keepnotes.main:app).

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership scoping, lifecycle flags
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The authenticated user id is resolved once per request by the identity
    dependency (keepnotes.security) and handed explicitly to every service
    call. There is no global "current user".
"""

__version__ = "1.0.0"
