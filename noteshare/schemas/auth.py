"""
NoteShare Backend: Authentication Schemas
==========================================

What:  Request bodies for /register and /login, the public identity view,
       and the typed session claims carried inside every token.

Request bodies only check types. Length and format rules are applied by
the registration flow so that they run in a fixed order and produce the
messages the API documents.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    username: str = Field(description="Unique username, at least 3 characters")
    email: str = Field(description="Unique email address")
    password: str = Field(description="Plaintext password, 6 to 72 bytes")


class LoginRequest(BaseModel):
    login: str = Field(description="Username or email")
    password: str = Field(description="Plaintext password")


class UserPublic(BaseModel):
    """Outward view of an identity. Never carries the password hash."""
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str = Field(default="User registered successfully")
    user: UserPublic


class LoginResponse(BaseModel):
    token: str = Field(description="Signed session token, valid for 24 hours")
    user: UserPublic


class SessionClaims(BaseModel):
    """
    Decoded payload of a session token.

    Validated on decode: a token whose payload is missing any of these
    fields, or carries them with the wrong type, is rejected as a whole.
    """
    user_id: int
    username: str
    email: str
    iat: int
    exp: int

    model_config = ConfigDict(frozen=True, extra="ignore")


class AuthenticatedUser(BaseModel):
    """
    Identity produced by the access guard for one request.

    Handlers receive it as an explicit parameter.
    """
    id: int
    username: str
    email: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "AuthenticatedUser":
        return cls(
            id=claims.user_id,
            username=claims.username,
            email=claims.email,
        )
