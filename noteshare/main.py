"""
NoteShare Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires configuration, auth components, middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (uvicorn noteshare.main:app) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  app.state:   password_hasher, token_service,       │
    │               auth_service (built from Settings)    │
    │                                                     │
    │  Routes:      /api/register  /api/login  /api/me    │
    │               /api/notes...  /api/public/notes...   │
    │               /health                               │
    │                                                     │
    │  Errors:      400 │ 401 │ 404 │ 409 │ 500           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check the JWT secret (fatal in
              production), optionally create tables.
    Shutdown: dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from noteshare import __version__
from noteshare.config import Settings, settings as default_settings
from noteshare.database import create_tables, dispose_engine
from noteshare.exceptions import (
    AuthenticationError,
    ConflictError,
    HashingError,
    NoteShareError,
    NotFoundError,
    StoreError,
    TokenError,
    ValidationError,
)
from noteshare.middleware.logging import RequestLoggingMiddleware
from noteshare.middleware.request_id import RequestIDMiddleware, request_id_var
from noteshare.routes import auth, health, notes, public
from noteshare.services.auth_service import AuthService
from noteshare.services.password_hasher import PasswordHasher
from noteshare.services.token_service import TokenService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """Configure root logging once at startup (stdout, ISO timestamps)."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def check_jwt_secret(config: Settings) -> None:
    """
    Report the insecure development secret loudly; refuse it in production.

    Raises:
        RuntimeError: APP_ENV=production and JWT_SECRET is not set.
    """
    try:
        config.validate_required_for_production()
    except ValueError as e:
        if config.is_production:
            raise RuntimeError(str(e)) from e
        logger.error("%s", str(e))
        logger.error("Using the insecure development JWT secret. Do NOT deploy like this.")


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("NoteShare Backend %s starting up (env=%s)", __version__, config.app_env)

    check_jwt_secret(config)

    if config.db_auto_create:
        await create_tables()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("NoteShare Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(message: str, code: str, details: Optional[dict] = None) -> dict:
    body = {"error": message, "code": code, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy to HTTP responses.

    Handler table:
        ValidationError, RequestValidationError → 400
        AuthenticationError, TokenError         → 401
        NotFoundError                           → 404
        ConflictError                           → 409
        HashingError, StoreError                → 500 (generic message)
        NoteShareError, Exception               → 500 (generic message)

    500 responses never include internal details; those are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.message, "validation_error", exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Malformed or incomplete JSON body.
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.warning("[%s] Invalid request body: %s", request_id_var.get(""), fields)
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid input", "validation_error", {"fields": fields}),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content=_error_body(exc.message, "unauthorized"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(TokenError)
    async def handle_token_error(request: Request, exc: TokenError):
        return JSONResponse(
            status_code=401,
            content=_error_body(exc.message, "unauthorized"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body(exc.message, "not_found"))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content=_error_body(exc.message, "conflict"))

    @app.exception_handler(HashingError)
    async def handle_hashing_error(request: Request, exc: HashingError):
        logger.error("[%s] Hashing error | Context: %s", request_id_var.get(""), exc.context)
        return JSONResponse(status_code=500, content=_error_body(exc.message, "server_error"))

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "An internal error occurred. Please try again later.", "server_error"
            ),
        )

    @app.exception_handler(NoteShareError)
    async def handle_noteshare_error(request: Request, exc: NoteShareError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("An internal error occurred. Please try again later.", "server_error"),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "An unexpected error occurred. Please try again or contact support.",
                "internal_server_error",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_auth_components(app: FastAPI, config: Settings) -> None:
    """Build the hasher, token service and auth flows from one Settings object."""
    hasher = PasswordHasher(rounds=config.bcrypt_rounds)
    tokens = TokenService(secret=config.resolved_jwt_secret())
    app.state.password_hasher = hasher
    app.state.token_service = tokens
    app.state.auth_service = AuthService(hasher=hasher, tokens=tokens)


DATABASE_FIELDS = ("database_url", "db_pool_size", "db_max_overflow", "db_pool_pre_ping")


def check_database_settings(config: Settings) -> bool:
    """
    Warn when `config` disagrees with the process-wide database engine.

    The engine in noteshare.database is built once, at import, from the
    environment. A Settings object handed to create_app() cannot rebind it.

    Returns:
        True when the database fields match the engine's settings.
    """
    mismatched = [
        name
        for name in DATABASE_FIELDS
        if getattr(config, name) != getattr(default_settings, name)
    ]
    if mismatched:
        # The URL may carry a password, so only field names are logged.
        logger.warning(
            "Ignoring database settings passed to create_app(): %s. "
            "The engine uses the values from the environment.",
            ", ".join(mismatched),
        )
        return False
    return True


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: settings for the auth components, CORS and lifespan; the
            process-wide `settings` when None. Database options always come
            from the environment (see check_database_settings).
    """
    config = config or default_settings

    app = FastAPI(
        title="NoteShare API",
        description="Multi-user notes with private and public sharing.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    build_auth_components(app, config)
    check_database_settings(config)

    # Last added = first to execute.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(public.router)
    app.include_router(health.router)

    return app


app = create_app()
