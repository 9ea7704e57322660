"""
TechNotes Backend - User Request/Response Schemas
===================================================

What:  Pydantic models defining the /users API contract.
How:   Request models accept every field as optional so that the service
       layer can apply the business rules (required fields, non-empty role
       list) and answer with 400 and a readable message. Types are strict:
       `"active": "yes"` is rejected rather than coerced.

Security:
    UserResponse has no password field. Responses are built from it with
    from_attributes, so the hash cannot leak even if the ORM row is passed in.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreateRequest(BaseModel):
    """Body of POST /users."""
    username: Optional[StrictStr] = Field(default=None, description="Unique login name")
    password: Optional[StrictStr] = Field(default=None, description="Plain-text password (hashed before storage)")
    roles: Optional[List[StrictStr]] = Field(default=None, description="Non-empty list of role labels")


class UserUpdateRequest(BaseModel):
    """
    Body of PATCH /users.

    password is optional: omit it to keep the current one.
    """
    id: Optional[uuid.UUID] = Field(default=None, description="Id of the user to update")
    username: Optional[StrictStr] = Field(default=None)
    roles: Optional[List[StrictStr]] = Field(default=None)
    active: Optional[StrictBool] = Field(default=None, description="Account enabled flag")
    password: Optional[StrictStr] = Field(default=None, description="New password, if changing it")


class UserDeleteRequest(BaseModel):
    """Body of DELETE /users."""
    id: Optional[uuid.UUID] = Field(default=None, description="Id of the user to delete")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """A user as exposed by the API (password omitted)."""
    id: uuid.UUID = Field(description="Unique user identifier (UUID)")
    username: str
    roles: List[str]
    active: bool

    model_config = {"from_attributes": True}
