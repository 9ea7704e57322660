"""
TechNotes Backend - Note Route Handlers
=========================================

What:  GET/POST/PATCH/DELETE /notes.
How:   Extracts the JSON body and delegates to NoteService. As with /users,
       PATCH and DELETE carry the note id in the body.
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from technotes.database import get_db_session
from technotes.schemas.common import ErrorResponse, MessageResponse
from technotes.schemas.note import (
    NoteCreateRequest,
    NoteDeleteRequest,
    NoteResponse,
    NoteUpdateRequest,
)
from technotes.services.note_service import note_service

router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all notes with owner usernames",
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_notes(db)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.post(
    "",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields or unknown user", "model": ErrorResponse},
        409: {"description": "Duplicate note title", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NoteCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.create_note(
        db=db,
        user_id=payload.user,
        title=payload.title,
        text=payload.text,
    )


@router.patch(
    "",
    response_model=MessageResponse,
    responses={
        400: {"description": "Missing fields, note or user not found", "model": ErrorResponse},
        409: {"description": "Duplicate note title", "model": ErrorResponse},
    },
    summary="Update a note",
)
async def update_note(
    payload: NoteUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.update_note(
        db=db,
        note_id=payload.id,
        user_id=payload.user,
        title=payload.title,
        text=payload.text,
        completed=payload.completed,
    )


@router.delete(
    "",
    response_model=MessageResponse,
    responses={400: {"description": "Missing id or note not found", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    payload: NoteDeleteRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.delete_note(db=db, note_id=payload.id)
