"""
NoteShare Backend: Credential Store
====================================

What:  Data access for identity records (the `users` table).
How:   Thin async repository over a request-scoped AsyncSession.
Who:   Used by AuthService for registration and login.

Uniqueness:
    The unique constraints on users.username and users.email are the source
    of truth. The exists_* checks let the registration flow answer with a
    precise message, but two concurrent registrations can both pass them;
    the loser's insert then fails inside create() and surfaces as
    DuplicateError.

Lookups are exact and case-sensitive ("Alice" and "alice" are different
usernames) on both PostgreSQL and SQLite.
"""

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from noteshare.exceptions import DuplicateError, StoreError
from noteshare.models.user import User

logger = logging.getLogger(__name__)


def _duplicate_field(error: IntegrityError) -> Optional[str]:
    """Work out which unique column an IntegrityError refers to."""
    detail = str(error.orig).lower()
    # PostgreSQL reports the constraint name, SQLite reports "users.<column>".
    if "uq_users_username" in detail or "users.username" in detail:
        return "username"
    if "uq_users_email" in detail or "users.email" in detail:
        return "email"
    return None


class CredentialStore:
    """Identity repository bound to one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username_or_email(self, login: str) -> Optional[User]:
        """Return the user whose username OR email equals `login`, if any."""
        try:
            result = await self.db.execute(
                select(User)
                .where(or_(User.username == login, User.email == login))
                .order_by(User.id)
                .limit(1)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up identity: %s", type(e).__name__)
            raise StoreError(context={"operation": "find_by_username_or_email"}) from e

    async def exists_by_username(self, username: str) -> bool:
        return await self._exists(User.username == username, "exists_by_username")

    async def exists_by_email(self, email: str) -> bool:
        return await self._exists(User.email == email, "exists_by_email")

    async def _exists(self, condition, operation: str) -> bool:
        try:
            result = await self.db.execute(select(User.id).where(condition).limit(1))
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error("Database error in %s: %s", operation, type(e).__name__)
            raise StoreError(context={"operation": operation}) from e

    async def create(self, user: User) -> User:
        """
        Insert a new identity and flush so the database assigns its id.

        Raises:
            DuplicateError: a unique constraint rejected the row.
            StoreError: any other database failure.
        """
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            field = _duplicate_field(e)
            logger.warning("Unique constraint rejected new identity (field=%s)", field)
            raise DuplicateError(field=field) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Database error creating identity: %s", type(e).__name__)
            raise StoreError(context={"operation": "create"}) from e
        return user
