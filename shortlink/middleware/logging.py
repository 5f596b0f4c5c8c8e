"""
Request Logging Middleware

Logs one line per HTTP request: method, path, status code, duration and
client address. Redirect traffic dominates, so the line stays short; the
short code is already part of the path.

Also sets an X-Process-Time header with the handler duration in seconds.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)


def client_address(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.exception(
                f"{request.method} {request.url.path} failed after "
                f"{elapsed * 1000:.2f}ms IP:{client_address(request)}"
            )
            raise

        elapsed = time.perf_counter() - started
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {elapsed * 1000:.2f}ms "
            f"IP:{client_address(request)}"
        )
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
