"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

Creates the `notes` table with independent lifecycle flags
(is_archived, is_deleted), the trash timestamp, and owner-leading indexes.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "owner_id",
            sa.String(128),
            nullable=False,
            comment="Identity provider user id of the note owner",
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column(
            "background_color",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'white'"),
        ),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "deleted_at",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="When the note was moved to the trash (UTC)",
        ),
        sa.Column("reminder_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        # deleted_at is set exactly when is_deleted is true
        sa.CheckConstraint(
            "(is_deleted AND deleted_at IS NOT NULL) OR (NOT is_deleted AND deleted_at IS NULL)",
            name="ck_notes_deleted_at_matches_flag",
        ),
    )

    # Listings filter by owner first, then by flags or reminder time
    op.create_index(
        "idx_notes_owner_flags",
        "notes",
        ["owner_id", "is_deleted", "is_archived"],
    )
    op.create_index(
        "idx_notes_owner_reminder",
        "notes",
        ["owner_id", "reminder_date"],
    )


def downgrade() -> None:
    """Drop the notes table. Destructive: all note data is lost."""
    op.drop_index("idx_notes_owner_reminder", table_name="notes")
    op.drop_index("idx_notes_owner_flags", table_name="notes")
    op.drop_table("notes")
