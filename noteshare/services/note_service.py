"""
NoteShare Backend: Note Service (Ownership Policy)
===================================================

What:  Every read and write of notes, scoped to the caller.
How:   Each query carries its own ownership predicate, so a note that
       belongs to someone else behaves exactly like a note that does not
       exist.
Who:   Called by the /api/notes and /api/public/notes route handlers.

Rules:
    list_own / get_own      owner_id == caller
    list_public/get_public  is_public == true, no caller needed
    create                  owner_id := caller, whatever the body says
    update / delete         match (id, owner_id == caller); no row → 404

Error Handling:
    NotFoundError propagates as-is. Any other database failure is logged
    and wrapped in StoreError so driver details never reach the client.
"""

import logging
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from noteshare.exceptions import NotFoundError, StoreError
from noteshare.models.note import Note
from noteshare.schemas.note import NoteResponse, NoteWrite

logger = logging.getLogger(__name__)


class NoteService:
    """
    Ownership-scoped note operations.

    Stateless; the database session and the caller's id are passed to every
    method.
    """

    async def list_own(self, db: AsyncSession, owner_id: int) -> List[NoteResponse]:
        """Notes owned by `owner_id`, newest first."""
        try:
            result = await db.execute(
                select(Note)
                .where(Note.owner_id == owner_id)
                .order_by(desc(Note.created_at), desc(Note.id))
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for user %d: %s", owner_id, str(e))
            raise StoreError(
                message="Could not retrieve notes. Please try again.",
                context={"owner_id": owner_id},
            ) from e

        logger.info("Fetched %d notes for user %d", len(notes), owner_id)
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_own(self, db: AsyncSession, note_id: int, owner_id: int) -> NoteResponse:
        """
        One note owned by `owner_id`.

        Raises:
            NotFoundError: no such note, or it belongs to another user
        """
        note = await self._load_owned(db, note_id, owner_id)
        return NoteResponse.model_validate(note)

    async def list_public(self, db: AsyncSession) -> List[NoteResponse]:
        """All public notes from every user, newest first."""
        try:
            result = await db.execute(
                select(Note)
                .where(Note.is_public.is_(True))
                .order_by(desc(Note.created_at), desc(Note.id))
            )
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing public notes: %s", str(e))
            raise StoreError(message="Could not retrieve public notes. Please try again.") from e

        logger.info("Fetched %d public notes", len(notes))
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_public(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        One public note, whoever owns it.

        Raises:
            NotFoundError: no such note, or it is private
        """
        try:
            result = await db.execute(
                select(Note).where(Note.id == note_id, Note.is_public.is_(True))
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching public note %d: %s", note_id, str(e))
            raise StoreError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return NoteResponse.model_validate(note)

    async def create(self, db: AsyncSession, owner_id: int, data: NoteWrite) -> NoteResponse:
        """Store a new note owned by `owner_id`."""
        note = Note(
            owner_id=owner_id,
            title=data.title,
            content=data.content,
            image_url=data.image_url or None,
            is_public=data.is_public,
        )
        try:
            db.add(note)
            await db.flush()
            await db.refresh(note)
        except SQLAlchemyError as e:
            logger.error("Database error creating note for user %d: %s", owner_id, str(e))
            raise StoreError(
                message="Could not save the note. Please try again.",
                context={"owner_id": owner_id},
            ) from e

        if note.image_url:
            logger.info("Note %d created with image by user %d", note.id, owner_id)
        else:
            logger.info("Note %d created by user %d", note.id, owner_id)
        return NoteResponse.model_validate(note)

    async def update(
        self,
        db: AsyncSession,
        note_id: int,
        owner_id: int,
        data: NoteWrite,
    ) -> NoteResponse:
        """
        Replace the editable fields of a note owned by `owner_id`.

        Raises:
            NotFoundError: no such note, or it belongs to another user
        """
        note = await self._load_owned(db, note_id, owner_id)
        old_title = note.title

        note.title = data.title
        note.content = data.content
        note.image_url = data.image_url or None
        note.is_public = data.is_public
        try:
            await db.flush()
            await db.refresh(note)
        except SQLAlchemyError as e:
            logger.error("Database error updating note %d: %s", note_id, str(e))
            raise StoreError(
                message="Could not update the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        logger.info("Note %d updated by user %d: %r -> %r", note_id, owner_id, old_title, note.title)
        return NoteResponse.model_validate(note)

    async def delete(self, db: AsyncSession, note_id: int, owner_id: int) -> None:
        """
        Delete a note owned by `owner_id`.

        Raises:
            NotFoundError: zero rows matched (absent, or another user's note)
        """
        try:
            result = await db.execute(
                delete(Note).where(Note.id == note_id, Note.owner_id == owner_id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %d: %s", note_id, str(e))
            raise StoreError(
                message="Could not delete the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        if result.rowcount == 0:
            logger.info("Delete of note %d by user %d matched no rows", note_id, owner_id)
            raise NotFoundError(resource="note", resource_id=str(note_id))
        logger.info("Note %d deleted by user %d", note_id, owner_id)

    async def _load_owned(self, db: AsyncSession, note_id: int, owner_id: int) -> Note:
        try:
            result = await db.execute(
                select(Note).where(Note.id == note_id, Note.owner_id == owner_id)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %d: %s", note_id, str(e))
            raise StoreError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            ) from e

        if note is None:
            logger.info("Note %d not found for user %d", note_id, owner_id)
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note


note_service = NoteService()
