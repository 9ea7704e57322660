"""
TechNotes Backend - Note SQLAlchemy Model
===========================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD, by UserService to block deleting a user
       who still owns notes, and by Alembic for schema management.

Table Design:
    - user_id: owning user's id. A soft reference: no foreign key, the
      services keep it consistent (a user with notes cannot be deleted).
    - ticket: human-friendly sequence number, starting at 500
    - completed: whether the work described by the note is done
    - created_at / updated_at: UTC, timezone-aware

Index on user_id:
    Serves the "does this user still own notes?" lookup on user deletion.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy import text as sa_text
from sqlalchemy.orm import Mapped, mapped_column

from technotes.database import Base

TICKET_START = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """A work note assigned to a user."""

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="Owning user id (no database-level foreign key)",
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False)

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=sa_text("false"),
    )

    ticket: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Sequential ticket number, first note gets 500",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=sa_text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=sa_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_user_id", "user_id"),
        Index("idx_notes_ticket", "ticket", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, ticket={self.ticket}, completed={self.completed})>"
