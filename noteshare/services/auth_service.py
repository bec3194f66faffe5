"""
NoteShare Backend: Authentication Service (Registration & Login Flows)
=======================================================================

What:  Registers new identities and exchanges credentials for session tokens.
How:   Composes CredentialStore, PasswordHasher and TokenService.
Who:   Called by the /api/register and /api/login route handlers.

Registration (first failing check wins, nothing is written on failure):
    1. username length >= 3
    2. username length <= 150 (column width)
    3. password length >= 6
    4. password <= 72 bytes (bcrypt limit)
    5. email contains "@" followed later by "."
    6. email length <= 255 (column width)
    7. username not taken
    8. email not taken
    → hash password → insert → return public view

Login:
    lookup by username OR email → bcrypt verify → issue 24h token

    Unknown login and wrong password produce the same 401 message. The log
    records which one happened.
"""

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from noteshare.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateError,
    ValidationError,
)
from noteshare.models.user import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH, User
from noteshare.schemas.auth import UserPublic
from noteshare.services.credential_store import CredentialStore
from noteshare.services.password_hasher import MAX_PASSWORD_BYTES, PasswordHasher
from noteshare.services.token_service import TokenService

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid login or password"

_CONFLICT_MESSAGES = {
    "username": "Username already taken",
    "email": "Email already registered",
    None: "Username or email already registered",
}


def validate_registration(username: str, email: str, password: str) -> None:
    """
    Apply the stateless registration rules in order.

    Raises:
        ValidationError: naming the first rule that failed.
    """
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters", field="username"
        )
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters", field="username"
        )
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes", field="password"
        )
    at = email.find("@")
    if at < 0 or "." not in email[at + 1:]:
        raise ValidationError("Invalid email format", field="email")
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(
            f"Email must be at most {EMAIL_MAX_LENGTH} characters", field="email"
        )


class AuthService:
    """
    Registration and login flows.

    Holds no per-request state: the database session is passed to each call,
    the hasher and token service are injected once by create_app().
    """

    def __init__(self, hasher: PasswordHasher, tokens: TokenService):
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
    ) -> UserPublic:
        """
        Create a new identity.

        Returns:
            The public view (id, username, email) of the stored identity.

        Raises:
            ValidationError: input breaks a length or format rule (400)
            ConflictError: username or email already registered (409)
            HashingError: the password could not be hashed (500)
            StoreError: the insert failed for another reason (500)
        """
        logger.info("Registration attempt for username=%s email=%s", username, email)
        try:
            validate_registration(username, email, password)
        except ValidationError as e:
            logger.info("Registration rejected for username=%s: %s", username, e.message)
            raise

        store = CredentialStore(db)
        if await store.exists_by_username(username):
            logger.info("Registration rejected: username taken (%s)", username)
            raise ConflictError(_CONFLICT_MESSAGES["username"], field="username")
        if await store.exists_by_email(email):
            logger.info("Registration rejected: email taken (%s)", email)
            raise ConflictError(_CONFLICT_MESSAGES["email"], field="email")

        password_hash = await run_in_threadpool(self.hasher.hash, password)

        try:
            user = await store.create(
                User(username=username, email=email, password_hash=password_hash)
            )
        except DuplicateError as e:
            # Lost a race with a concurrent registration.
            logger.info("Registration rejected by unique constraint (field=%s)", e.field)
            message = _CONFLICT_MESSAGES.get(e.field, _CONFLICT_MESSAGES[None])
            raise ConflictError(message, field=e.field) from e

        logger.info("User registered: %s (id=%d)", user.username, user.id)
        return UserPublic.model_validate(user)

    async def login(
        self,
        db: AsyncSession,
        login: str,
        password: str,
    ) -> Tuple[str, UserPublic]:
        """
        Verify a credential and issue a session token.

        Args:
            login: username or email, matched exactly
            password: plaintext password

        Returns:
            (token, public view of the identity)

        Raises:
            ValidationError: login or password missing (400)
            AuthenticationError: unknown login or wrong password (401)
        """
        if not login or not password:
            raise ValidationError("Login and password are required")

        logger.info("Login attempt for %s", login)
        user = await CredentialStore(db).find_by_username_or_email(login)
        if user is None:
            logger.info("Login failed for %s: no such user", login)
            raise AuthenticationError(INVALID_CREDENTIALS)

        matches = await run_in_threadpool(self.hasher.verify, password, user.password_hash)
        if not matches:
            logger.info("Login failed for %s (id=%d): wrong password", user.username, user.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = self.tokens.issue(user_id=user.id, username=user.username, email=user.email)
        logger.info("Login successful: %s (id=%d)", user.username, user.id)
        return token, UserPublic.model_validate(user)
