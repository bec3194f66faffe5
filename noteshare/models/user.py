"""
NoteShare Backend: User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table (the persisted identity record).
Who:   Written by the registration flow through CredentialStore, read by the
       login flow. Notes reference it through notes.owner_id.

Uniqueness of username and email is enforced by the named constraints
below. CredentialStore relies on those names to tell which field collided.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from noteshare.database import Base

# Column widths; the registration flow rejects longer input before the INSERT.
USERNAME_MAX_LENGTH = 150
EMAIL_MAX_LENGTH = 255


class User(Base):
    """
    A registered identity.

    password_hash holds a bcrypt digest. It is never part of any response
    schema; see schemas.auth.UserPublic for the outward view.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), nullable=False)

    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)

    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    def __repr__(self) -> str:
        # password_hash deliberately left out
        return f"<User(id={self.id}, username='{self.username}')>"
