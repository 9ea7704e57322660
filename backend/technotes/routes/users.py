"""
TechNotes Backend - User Route Handlers
=========================================

What:  GET/POST/PATCH/DELETE /users.
How:   Thin handlers: parse the JSON body, delegate to UserService, return its
       result. Errors raised by the service are formatted by the global
       exception handlers in main.py.

Note that PATCH and DELETE address the user by an `id` in the JSON body,
not in the path.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.database import get_db_session
from technotes.schemas.common import ErrorResponse, MessageResponse
from technotes.schemas.user import (
    UserCreateRequest,
    UserDeleteRequest,
    UserResponse,
    UserUpdateRequest,
)
from technotes.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all users",
)
async def list_users(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    """Every user, password omitted."""
    users = await user_service.list_users(db)
    response.headers["X-Total-Count"] = str(len(users))
    return users


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing username, password or roles", "model": ErrorResponse},
        409: {"description": "Username already taken", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.create_user(
        db=db,
        username=payload.username,
        password=payload.password,
        roles=payload.roles,
    )


@router.patch(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or user not found", "model": ErrorResponse},
        409: {"description": "Username belongs to another user", "model": ErrorResponse},
    },
    summary="Update a user",
)
async def update_user(
    payload: UserUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Replace username, roles and active flag.

    The password is changed only when the body carries a non-empty one.
    """
    return await user_service.update_user(
        db=db,
        user_id=payload.id,
        username=payload.username,
        roles=payload.roles,
        active=payload.active,
        password=payload.password,
    )


@router.delete(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing id, user not found, or user still owns notes", "model": ErrorResponse},
    },
    summary="Delete a user",
)
async def delete_user(
    payload: UserDeleteRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.delete_user(db=db, user_id=payload.id)
