"""
Request logging middleware.

Writes an entry line before the request is handled and, once the
response is ready, an exit line with the method, the URL as seen from
the configured server address, the request content length and a
timestamp.  The response is passed through untouched.  If anything
downstream raises, the failure is logged with its traceback and the
exception is re-raised so the server still fails the request.
"""

import logging
import time
from datetime import datetime

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from .logging_config import LOG_DATEFMT

logger = logging.getLogger(__name__)


def request_url(server_addr: str, request: Request) -> str:
    """Return ``server_addr`` followed by the request path and query."""
    url = server_addr + request.url.path
    if request.url.query:
        url += "?" + request.url.query
    return url


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one entry line and one exit line per request."""

    def __init__(self, app: ASGIApp, server_addr: str = "") -> None:
        super().__init__(app)
        self.server_addr = server_addr

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        url = request_url(self.server_addr, request)
        logger.info("Request started: %s %s", request.method, url)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request failed: %s %s", request.method, url)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Request finished: verb=%s url=%s size=%s bytes status=%s time=%s elapsed=%.1fms",
            request.method,
            url,
            request.headers.get("Content-Length", "0"),
            response.status_code,
            datetime.now().strftime(LOG_DATEFMT),
            elapsed_ms,
        )
        return response
