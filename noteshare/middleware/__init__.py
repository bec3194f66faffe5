"""
NoteShare Backend: Middleware Package
======================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and any error body carry
    the correlation id.

Authentication is not a middleware: protected routes declare the access
guard (dependencies.require_user) and receive the caller's identity as a
parameter. Public routes and /health never see it.
"""
