"""
Static token authentication.

Every request must carry an ``Authorization`` header equal, byte for
byte, to the configured ``API_TOKEN``.  The check runs as middleware
so it gates all routes, and a rejected request never reaches the
route handler.  When no token is configured every request is
accepted; that mode exists for local development and tests.
"""

import hmac
import logging

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from .errors import error_response

logger = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"


def token_matches(presented: str, expected: str) -> bool:
    """Return ``True`` if ``presented`` is acceptable for ``expected``.

    An empty ``expected`` token accepts anything.  The comparison is
    constant time.
    """
    if not expected:
        return True
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Reject requests whose ``Authorization`` header differs from the token."""

    def __init__(self, app: ASGIApp, token: str = "") -> None:
        super().__init__(app)
        self.token = token

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        presented = request.headers.get("Authorization", "")
        if not token_matches(presented, self.token):
            logger.warning("Rejected %s %s: invalid token", request.method, request.url.path)
            return error_response(status.HTTP_401_UNAUTHORIZED, UNAUTHORIZED)
        return await call_next(request)
