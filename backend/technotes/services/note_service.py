"""
TechNotes Backend - Note Service (Business Logic)
===================================================

What:  Listing, creation, update and deletion of work notes.
How:   Same shape as UserService: validate fields, run the duplicate and
       existence lookups, flush on the request's session.
Who:   Called by the /notes route handlers.

Ownership:
    Note.user_id is a soft reference. Creating or re-assigning a note checks
    that the owner exists; UserService refuses to delete a user with notes.
    Listing attaches the owner's username, or null if the owner is gone.

Tickets:
    Each new note gets max(ticket) + 1, starting from TICKET_START (500).
    The unique index on ticket turns a concurrent collision into a 409.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    TechNotesError,
    ValidationError,
)
from technotes.models.note import TICKET_START, Note
from technotes.models.user import User
from technotes.schemas.common import MessageResponse
from technotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)


class NoteService:
    """Business logic layer for notes."""

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every note, ordered by ticket, with the owner's username.

        Query plan:
            SELECT * FROM notes ORDER BY ticket
            SELECT id, username FROM users WHERE id IN (:owner_ids)
        """
        try:
            result = await db.execute(select(Note).order_by(Note.ticket))
            notes = list(result.scalars().all())

            usernames: Dict[UUID, str] = {}
            owner_ids = {note.user_id for note in notes}
            if owner_ids:
                owners = await db.execute(
                    select(User.id, User.username).where(User.id.in_(list(owner_ids)))
                )
                usernames = {row.id: row.username for row in owners.all()}

        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [self._to_response(note, usernames.get(note.user_id)) for note in notes]

    async def create_note(
        self,
        db: AsyncSession,
        user_id: Optional[UUID],
        title: Optional[str],
        text: Optional[str],
    ) -> MessageResponse:
        """
        Create a note for an existing user with the next ticket number.

        Raises:
            ValidationError: user, title or text missing (→ 400)
            NotFoundError: owner does not exist (→ 400)
            ConflictError: title already used by another note (→ 409)
            DatabaseError: query or insert failed (→ 500)
        """
        if not user_id or not title or not text:
            raise ValidationError(
                message="All fields are required",
                context={"fields": ["user", "title", "text"]},
            )

        try:
            await self._require_owner(db, user_id)

            if await self._find_by_title(db, title) is not None:
                raise ConflictError(message="Duplicate note title", field="title")

            note = Note(
                user_id=user_id,
                title=title,
                text=text,
                ticket=await self._next_ticket(db),
            )
            db.add(note)
            await db.flush()

        except TechNotesError:
            raise
        except IntegrityError:
            raise ConflictError(message="Duplicate note title or ticket, please retry")
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note created: ticket %d (%s)", note.ticket, note.id)
        return MessageResponse(message="New note created")

    async def update_note(
        self,
        db: AsyncSession,
        note_id: Optional[UUID],
        user_id: Optional[UUID],
        title: Optional[str],
        text: Optional[str],
        completed: Optional[bool],
    ) -> MessageResponse:
        """
        Replace a note's owner, title, text and completed flag.

        Raises:
            ValidationError: a field is missing or completed is not a bool (→ 400)
            NotFoundError: note or new owner does not exist (→ 400)
            ConflictError: title belongs to a different note (→ 409)
            DatabaseError: query or update failed (→ 500)
        """
        if (
            not note_id
            or not user_id
            or not title
            or not text
            or not isinstance(completed, bool)
        ):
            raise ValidationError(
                message="All fields are required",
                context={"fields": ["id", "user", "title", "text", "completed"]},
            )

        try:
            note = await self._get_by_id(db, note_id)
            if note is None:
                raise NotFoundError(resource="Note", resource_id=str(note_id))

            duplicate = await self._find_by_title(db, title)
            if duplicate is not None and duplicate.id != note.id:
                raise ConflictError(message="Duplicate note title", field="title")

            if user_id != note.user_id:
                await self._require_owner(db, user_id)

            note.user_id = user_id
            note.title = title
            note.text = text
            note.completed = completed
            await db.flush()

        except TechNotesError:
            raise
        except IntegrityError:
            raise ConflictError(message="Duplicate note title", field="title")
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        return MessageResponse(message=f"'{note.title}' updated")

    async def delete_note(self, db: AsyncSession, note_id: Optional[UUID]) -> MessageResponse:
        """
        Delete a note by id.

        Raises:
            ValidationError: id missing (→ 400)
            NotFoundError: no note with this id (→ 400)
        """
        if not note_id:
            raise ValidationError(message="Note ID required", field="id")

        try:
            note = await self._get_by_id(db, note_id)
            if note is None:
                raise NotFoundError(resource="Note", resource_id=str(note_id))

            title, deleted_id = note.title, note.id
            await db.delete(note)
            await db.flush()

        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        logger.info("Note deleted: %s", deleted_id)
        return MessageResponse(message=f"Note '{title}' with ID {deleted_id} deleted")

    # ── Lookups ───────────────────────────────────────────────────────────

    async def _get_by_id(self, db: AsyncSession, note_id: UUID) -> Optional[Note]:
        result = await db.execute(select(Note).where(Note.id == note_id))
        return result.scalar_one_or_none()

    async def _find_by_title(self, db: AsyncSession, title: str) -> Optional[Note]:
        result = await db.execute(select(Note).where(Note.title == title).limit(1))
        return result.scalar_one_or_none()

    async def _require_owner(self, db: AsyncSession, user_id: UUID) -> None:
        result = await db.execute(select(User.id).where(User.id == user_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="User", resource_id=str(user_id))

    async def _next_ticket(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.max(Note.ticket)))
        current = result.scalar()
        return TICKET_START if current is None else current + 1

    @staticmethod
    def _to_response(note: Note, username: Optional[str]) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            user=note.user_id,
            username=username,
            title=note.title,
            text=note.text,
            completed=note.completed,
            ticket=note.ticket,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


note_service = NoteService()
