"""
NoteShare Backend: Notes Route Handlers (owner-scoped)
=======================================================

What:  CRUD on the caller's own notes under /api/notes.
How:   Every handler depends on require_user and passes the authenticated
       id to NoteService explicitly. Another user's note is answered with
       404, exactly like a note that does not exist.

Routes:
    GET    /api/notes          list own notes
    POST   /api/notes          create (owner forced to the caller)
    GET    /api/notes/{id}     get own note
    PUT    /api/notes/{id}     replace own note
    DELETE /api/notes/{id}     delete own note
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from noteshare.database import get_db_session
from noteshare.dependencies import require_user
from noteshare.schemas.auth import AuthenticatedUser
from noteshare.schemas.common import ErrorResponse
from noteshare.schemas.note import MessageResponse, NoteResponse, NoteWrite
from noteshare.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/notes",
    tags=["Notes"],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}


@router.get("", response_model=List[NoteResponse], summary="List your notes")
async def list_notes(
    response: Response,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_own(db=db, owner_id=user.id)
    response.headers["X-Total-Count"] = str(len(notes))
    # Owner-specific data must not be kept by shared caches.
    response.headers["Cache-Control"] = "private, no-store"
    return notes


@router.post("", status_code=201, response_model=NoteResponse, summary="Create a note")
async def create_note(
    body: NoteWrite,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create(db=db, owner_id=user.id, data=body)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_NOT_FOUND,
    summary="Get one of your notes",
)
async def get_note(
    note_id: int,
    response: Response,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note = await note_service.get_own(db=db, note_id=note_id, owner_id=user.id)
    response.headers["Cache-Control"] = "private, no-store"
    return note


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses=_NOT_FOUND,
    summary="Replace one of your notes",
)
async def update_note(
    note_id: int,
    body: NoteWrite,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update(db=db, note_id=note_id, owner_id=user.id, data=body)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete one of your notes",
)
async def delete_note(
    note_id: int,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await note_service.delete(db=db, note_id=note_id, owner_id=user.id)
    return MessageResponse(message="Note deleted successfully")
