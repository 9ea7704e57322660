"""
TechNotes Backend - Note Request/Response Schemas
===================================================

What:  Pydantic models defining the /notes API contract.
How:   Same approach as the user schemas: optional, strictly typed request
       fields; the service decides which are required.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr


class NoteCreateRequest(BaseModel):
    """Body of POST /notes."""
    user: Optional[uuid.UUID] = Field(default=None, description="Id of the owning user")
    title: Optional[StrictStr] = Field(default=None)
    text: Optional[StrictStr] = Field(default=None)


class NoteUpdateRequest(BaseModel):
    """Body of PATCH /notes. Every field is required."""
    id: Optional[uuid.UUID] = Field(default=None, description="Id of the note to update")
    user: Optional[uuid.UUID] = Field(default=None, description="Id of the owning user")
    title: Optional[StrictStr] = Field(default=None)
    text: Optional[StrictStr] = Field(default=None)
    completed: Optional[StrictBool] = Field(default=None)


class NoteDeleteRequest(BaseModel):
    """Body of DELETE /notes."""
    id: Optional[uuid.UUID] = Field(default=None, description="Id of the note to delete")


class NoteResponse(BaseModel):
    """
    A note with its owner's username attached.

    username is null when the owning user id no longer resolves.
    """
    id: uuid.UUID
    user: uuid.UUID = Field(description="Owning user id")
    username: Optional[str] = Field(default=None, description="Owning user's username")
    title: str
    text: str
    completed: bool
    ticket: int = Field(description="Sequential ticket number")
    created_at: datetime
    updated_at: datetime
