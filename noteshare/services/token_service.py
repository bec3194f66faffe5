"""
NoteShare Backend: Token Service
=================================

What:  Issues and verifies signed, self-contained session tokens.
How:   HS256 JWTs (PyJWT) signed with the configured symmetric secret.
       Payload: {user_id, username, email, iat, exp}, exp = iat + 24 hours.

Verification is purely computational: no token registry exists, so a token
stays valid until its exp even if the user is deleted or changes password.

Every failure (garbage input, bad signature, wrong secret, missing or
mistyped claim, expiry) raises the same TokenError. Callers cannot tell
which check failed.
"""

import logging
import time
from datetime import timedelta
from typing import Callable, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from noteshare.exceptions import TokenError
from noteshare.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(hours=24)
ALGORITHM = "HS256"


class TokenService:
    """
    Session token issuer and verifier.

    Args:
        secret:   HMAC secret. Resolved from settings once, at startup.
        lifetime: Token validity window (24 hours).
        clock:    Returns the current UNIX time in seconds; injectable for tests.
    """

    def __init__(
        self,
        secret: str,
        lifetime: timedelta = TOKEN_LIFETIME,
        clock: Optional[Callable[[], float]] = None,
    ):
        if not secret:
            raise ValueError("TokenService requires a non-empty secret")
        self._secret = secret
        self.lifetime = lifetime
        self._clock = clock or time.time

    def issue(self, user_id: int, username: str, email: str) -> str:
        """Create a signed token for a freshly authenticated identity."""
        now = int(self._clock())
        claims = SessionClaims(
            user_id=user_id,
            username=username,
            email=email,
            iat=now,
            exp=now + int(self.lifetime.total_seconds()),
        )
        return jwt.encode(claims.model_dump(), self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> SessionClaims:
        """
        Decode and validate a token.

        Expiry is checked here against the injected clock rather than by
        PyJWT: the token is valid only while exp is strictly greater than now.

        Raises:
            TokenError: for any reason the token cannot be trusted.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
            claims = SessionClaims.model_validate(payload)
        except (jwt.InvalidTokenError, PydanticValidationError, TypeError) as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise TokenError() from e

        if claims.exp <= self._clock():
            logger.debug("Token rejected: expired for user_id=%s", claims.user_id)
            raise TokenError()
        return claims
