"""
NoteShare Backend: Authentication Route Handlers
=================================================

What:  POST /api/register, POST /api/login and GET /api/me.
How:   Parse the body, delegate to AuthService, shape the response.
       Failures are raised as NoteShareError subclasses and rendered by the
       global exception handlers in main.py.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noteshare.database import get_db_session
from noteshare.dependencies import get_auth_service, require_user
from noteshare.schemas.auth import (
    AuthenticatedUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserPublic,
)
from noteshare.schemas.common import ErrorResponse
from noteshare.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        409: {"description": "Username or email already registered", "model": ErrorResponse},
        500: {"description": "Hashing or database failure", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    user = await auth.register(
        db=db,
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return RegisterResponse(message="User registered successfully", user=user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Invalid login or password", "model": ErrorResponse},
    },
    summary="Exchange a username/email and password for a session token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    token, user = await auth.login(db=db, login=body.login, password=body.password)
    return LoginResponse(token=token, user=user)


@router.get(
    "/me",
    response_model=UserPublic,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Identity carried by the current session token",
)
async def me(user: AuthenticatedUser = Depends(require_user)) -> UserPublic:
    """Answered from the token claims alone; the database is not consulted."""
    return UserPublic(id=user.id, username=user.username, email=user.email)
