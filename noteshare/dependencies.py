"""
NoteShare Backend: Request Dependencies & Access Guard
=======================================================

What:  FastAPI dependencies that hand the shared auth components to route
       handlers, plus the access guard protecting every owner-scoped route.
How:   create_app() builds PasswordHasher, TokenService and AuthService from
       the settings and stores them on app.state; the getters below read
       them back for each request.

Access Guard (require_user):
    Authorization: Bearer <token>
        missing header          → 401 "Missing authorization header"
        not "Bearer <token>"    → 401 "Invalid or expired token"
        TokenService rejects it → 401 "Invalid or expired token"
        valid                   → AuthenticatedUser passed to the handler

    The guard only reads the header and verifies the signature. It never
    touches the database.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from noteshare.exceptions import AuthenticationError, TokenError
from noteshare.schemas.auth import AuthenticatedUser
from noteshare.services.auth_service import AuthService
from noteshare.services.token_service import TokenService

logger = logging.getLogger(__name__)

MISSING_AUTHORIZATION = "Missing authorization header"
INVALID_TOKEN = "Invalid or expired token"


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    Raises:
        AuthenticationError: header missing, wrong scheme, or empty token.
    """
    if not authorization:
        raise AuthenticationError(MISSING_AUTHORIZATION)
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise AuthenticationError(INVALID_TOKEN)
    return token


async def require_user(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    """
    Authenticate the request from its bearer token.

    Usage:
        @router.get("/notes")
        async def list_notes(user: AuthenticatedUser = Depends(require_user)):
            ...
    """
    token = extract_bearer_token(authorization)
    try:
        claims = tokens.verify(token)
    except TokenError as e:
        raise AuthenticationError(INVALID_TOKEN) from e
    return AuthenticatedUser.from_claims(claims)
