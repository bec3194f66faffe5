"""
NoteShare Backend: Note Request/Response Schemas
=================================================

What:  Pydantic models defining the notes API contract.
How:   FastAPI validates request bodies against them, serializes responses,
       and generates the OpenAPI documentation from them.

Note that NoteWrite has no owner field. Any `owner_id` or `user_id` a client
puts in the body is dropped during validation; the owner always comes from
the authenticated identity.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NoteWrite(BaseModel):
    """
    Body of POST /api/notes and PUT /api/notes/{id}.

    PUT replaces every field, so omitted fields fall back to these defaults.
    """
    title: str = Field(min_length=1, max_length=255, description="Note title")
    content: str = Field(default="", description="Note body")
    image_url: Optional[str] = Field(
        default=None,
        description="Optional reference to an image stored elsewhere",
    )
    is_public: bool = Field(default=False, description="Readable by everyone when true")

    model_config = {"extra": "ignore"}


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: int = Field(description="Note identifier")
    owner_id: int = Field(description="Identifier of the owning user")
    title: str
    content: str
    image_url: Optional[str] = None
    is_public: bool
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC)")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
