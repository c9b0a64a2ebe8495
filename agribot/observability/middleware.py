"""
FastAPI middleware for observability.

CorrelationMiddleware binds the request correlation id and echoes it in
the response; RequestLoggingMiddleware writes one access line per
request. Health checks are logged at DEBUG so they do not drown chat
traffic.

Dependencies: fastapi, starlette, agribot.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from agribot.observability.correlation import CORRELATION_HEADER, correlation_scope

logger = logging.getLogger(__name__)

QUIET_PATH_SUFFIXES = ("/health", "/health/db")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with status code and duration."""

    async def dispatch(self, request: Request, call_next):
        """
        Log one line per request once the response status is known.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response object
        """
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        level = logging.DEBUG if path.endswith(QUIET_PATH_SUFFIXES) else logging.INFO

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - unhandled {type(e).__name__}",
                extra={"method": method, "path": path, "process_time_ms": _elapsed_ms(start)},
            )
            raise

        logger.log(
            level,
            f"{method} {path} - {response.status_code} ({_elapsed_ms(start)}ms)",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "client_host": request.client.host if request.client else None,
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Correlation id binding for every request."""

    async def dispatch(self, request: Request, call_next):
        """
        Bind the incoming (or a new) correlation id and echo it back.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response with the correlation id header
        """
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response: Response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
