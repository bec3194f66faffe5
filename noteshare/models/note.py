"""
NoteShare Backend: Note SQLAlchemy Model
=========================================

What:  ORM model representing the `notes` table.
Who:   Queried and mutated exclusively by NoteService, which applies the
       ownership rules. Alembic reads it for migrations.

Table Design:
    - owner_id: required FK to users.id; every note has exactly one owner
    - is_public: public notes are readable by anyone, private ones only by
      their owner
    - image_url: optional reference to an image hosted elsewhere
    - created_at / updated_at: UTC with timezone

    Index on (owner_id, created_at): serves "my notes, newest first".
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column

from noteshare.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """A note owned by a single user, optionally shared publicly."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_owner_created_at", "owner_id", "created_at"),
        Index("idx_notes_public_created_at", "is_public", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, owner_id={self.owner_id}, "
            f"is_public={self.is_public})>"
        )
