"""
NoteShare Backend: Public Notes Route Handlers
===============================================

What:  Read-only access to notes their owners marked public.
Who:   Anyone; no Authorization header is required or inspected.

Routes:
    GET /api/public/notes        all public notes, newest first
    GET /api/public/notes/{id}   one public note (private or missing → 404)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from noteshare.database import get_db_session
from noteshare.schemas.common import ErrorResponse
from noteshare.schemas.note import NoteResponse
from noteshare.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public", tags=["Public notes"])


@router.get("/notes", response_model=List[NoteResponse], summary="List public notes")
async def list_public_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_public(db=db)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={404: {"description": "Note not found or not public", "model": ErrorResponse}},
    summary="Get a public note",
)
async def get_public_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_public(db=db, note_id=note_id)
