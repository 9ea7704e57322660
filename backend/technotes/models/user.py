"""
TechNotes Backend - User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, generated in Python so SQLite and PostgreSQL behave alike
    - username: unique index backs the service-level duplicate check
    - password: bcrypt hash, never returned by the API
    - roles: JSON array of role labels (e.g. ["Employee", "Manager"])
    - active: soft on/off switch for the account
"""

import uuid
from typing import List

from sqlalchemy import JSON, Boolean, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from technotes.database import Base

DEFAULT_ROLES = ["Employee"]


class User(Base):
    """A staff account that can own notes."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Login name, unique across all users",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the user's password",
    )

    roles: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: list(DEFAULT_ROLES),
        comment="Role labels granted to the user",
    )

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    __table_args__ = (
        Index("idx_users_username", "username", unique=True),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', active={self.active})>"
