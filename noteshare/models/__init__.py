"""ORM models. Importing this package registers every table on Base.metadata."""

from noteshare.models.note import Note
from noteshare.models.user import User

__all__ = ["Note", "User"]
