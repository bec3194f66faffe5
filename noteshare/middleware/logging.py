"""
NoteShare Backend: Request Logging Middleware
==============================================

What:  One access-log line per HTTP request on the "noteshare.access"
       logger, correlated by request id.

Line format:
    <METHOD> <path> <status> <ms>ms [<request id>] from <ip>[ auth=rejected]

    401 responses are tagged auth=rejected so failed logins and bad tokens
    can be counted from the log alone.

What we log vs what we DON'T log:
    ✅ method, path, status, duration, IP, request ID
    ❌ request bodies (passwords), the Authorization header (tokens),
       response bodies
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from noteshare.middleware.request_id import request_id_var

logger = logging.getLogger("noteshare.access")

# Probed every few seconds by the orchestrator.
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes the access line after the response (or the failure) is known."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, started)
            raise
        self._log(request, response.status_code, started)
        return response

    @staticmethod
    def _log(request: Request, status: int, started: float) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        suffix = " auth=rejected" if status == 401 else ""

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            request.url.path,
            status,
            elapsed_ms,
            rid,
            client_ip,
            suffix,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
