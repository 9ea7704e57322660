"""
TechNotes Backend - User Service (Business Logic)
===================================================

What:  Listing, creation, update and deletion of user accounts.
How:   Validates the request fields, runs the duplicate/existence lookups,
       hashes passwords through PasswordService and flushes changes on the
       request's session (commit happens in get_db_session).
Who:   Called by the /users route handlers.

Rules:
    create: username, password and a non-empty roles list are required;
            a username already in use is a 409.
    update: id, username, a non-empty roles list and a boolean active flag
            are required; the duplicate check ignores the user being updated,
            so saving an unchanged username is allowed. A password is
            re-hashed only when one is supplied.
    delete: a user who still owns notes cannot be deleted.

Uniqueness:
    The duplicate lookup is backed by the unique index on users.username.
    Two concurrent creates can both pass the lookup; the loser's flush raises
    IntegrityError, which is reported as the same 409.
"""

import logging
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.exceptions import (
    ConflictError,
    DatabaseError,
    HasDependentsError,
    NotFoundError,
    TechNotesError,
    ValidationError,
)
from technotes.models.note import Note
from technotes.models.user import User
from technotes.schemas.common import MessageResponse
from technotes.schemas.user import UserResponse
from technotes.services.password_service import password_service

logger = logging.getLogger(__name__)


def _has_roles(roles: Optional[Sequence[str]]) -> bool:
    return isinstance(roles, (list, tuple)) and len(roles) > 0


class UserService:
    """
    Business logic layer for user accounts.

    Error Handling Strategy:
        Rule violations raise ValidationError / NotFoundError / ConflictError /
        HasDependentsError directly. Anything SQLAlchemy raises is wrapped in
        DatabaseError so internals never reach the client.
    """

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        """
        Return every user with the password omitted.

        An empty table yields an empty list; a failed query is a DatabaseError.
        """
        try:
            result = await db.execute(select(User).order_by(User.username))
            users = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [UserResponse.model_validate(user) for user in users]

    async def create_user(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
        roles: Optional[Sequence[str]],
    ) -> MessageResponse:
        """
        Create a user after validation and the duplicate-username check.

        Raises:
            ValidationError: username/password missing or roles empty (→ 400)
            ConflictError: username already taken (→ 409)
            DatabaseError: query or insert failed (→ 500)
        """
        if not username or not password or not _has_roles(roles):
            raise ValidationError(
                message="All fields are required",
                context={"fields": ["username", "password", "roles"]},
            )

        try:
            duplicate = await self._find_by_username(db, username)
            if duplicate is not None:
                raise ConflictError(message="Duplicate username", field="username")

            hashed = await password_service.hash(password)

            user = User(username=username, password=hashed, roles=list(roles))
            db.add(user)
            await db.flush()

        except TechNotesError:
            raise
        except IntegrityError:
            logger.info("Concurrent create lost the race for username %r", username)
            raise ConflictError(message="Duplicate username", field="username")
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if user.id is None:
            raise ValidationError(message="Invalid user data received")

        logger.info("User created: %s (%s)", user.username, user.id)
        return MessageResponse(message=f"New user {username} created")

    async def update_user(
        self,
        db: AsyncSession,
        user_id: Optional[UUID],
        username: Optional[str],
        roles: Optional[Sequence[str]],
        active: Optional[bool],
        password: Optional[str] = None,
    ) -> MessageResponse:
        """
        Update username, roles and active flag, and optionally the password.

        Raises:
            ValidationError: a required field is missing or active is not a bool (→ 400)
            NotFoundError: no user with this id (→ 400)
            ConflictError: username belongs to a different user (→ 409)
            DatabaseError: query or update failed (→ 500)
        """
        if (
            not user_id
            or not username
            or not _has_roles(roles)
            or not isinstance(active, bool)
        ):
            raise ValidationError(
                message="All fields except password are required",
                context={"fields": ["id", "username", "roles", "active"]},
            )

        try:
            user = await self._get_by_id(db, user_id)
            if user is None:
                raise NotFoundError(resource="User", resource_id=str(user_id))

            duplicate = await self._find_by_username(db, username)
            if duplicate is not None and duplicate.id != user.id:
                raise ConflictError(message="Duplicate username", field="username")

            user.username = username
            user.roles = list(roles)
            user.active = active

            if password:
                user.password = await password_service.hash(password)

            await db.flush()

        except TechNotesError:
            raise
        except IntegrityError:
            raise ConflictError(message="Duplicate username", field="username")
        except SQLAlchemyError as e:
            logger.error("Database error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the user. Please try again.",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            )

        logger.info("User updated: %s (%s)", user.username, user.id)
        return MessageResponse(message=f"{user.username} updated")

    async def delete_user(self, db: AsyncSession, user_id: Optional[UUID]) -> MessageResponse:
        """
        Delete a user who owns no notes.

        Raises:
            ValidationError: id missing (→ 400)
            HasDependentsError: at least one note references the user (→ 400)
            NotFoundError: no user with this id (→ 400)
            DatabaseError: query or delete failed (→ 500)
        """
        if not user_id:
            raise ValidationError(message="User ID required", field="id")

        try:
            result = await db.execute(
                select(Note.id).where(Note.user_id == user_id).limit(1)
            )
            if result.scalar_one_or_none() is not None:
                raise HasDependentsError(
                    message="User has assigned notes",
                    context={"user_id": str(user_id)},
                )

            user = await self._get_by_id(db, user_id)
            if user is None:
                raise NotFoundError(resource="User", resource_id=str(user_id))

            username, deleted_id = user.username, user.id
            await db.delete(user)
            await db.flush()

        except TechNotesError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the user. Please try again.",
                context={"user_id": str(user_id), "error_type": type(e).__name__},
            )

        logger.info("User deleted: %s (%s)", username, deleted_id)
        return MessageResponse(message=f"Username {username} with ID {deleted_id} deleted")

    # ── Lookups ───────────────────────────────────────────────────────────

    async def _get_by_id(self, db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def _find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username).limit(1))
        return result.scalar_one_or_none()


user_service = UserService()
