"""Authentication middleware for Starlette applications."""

from collections.abc import Iterable
from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware

from ..http import unauthorized
from .models import AuthenticationBackend

logger = structlog.get_logger()

DEFAULT_UNPROTECTED_PATHS = ("/health", "/metrics")


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle authentication for all requests."""

    def __init__(
        self,
        app: Any,
        auth_backend: AuthenticationBackend,
        unprotected_paths: Iterable[str] = DEFAULT_UNPROTECTED_PATHS,
    ):
        super().__init__(app)
        self.auth_backend = auth_backend
        self.unprotected_paths = frozenset(unprotected_paths)

    async def dispatch(self, request: Any, call_next: Any) -> Any:
        """Process request with authentication."""
        if request.url.path in self.unprotected_paths:
            return await call_next(request)

        user = await self.auth_backend.authenticate_request(request)

        if user is None:
            logger.warning(
                "Authentication failed",
                backend=self.auth_backend.name(),
                path=request.url.path,
                has_auth_header="authorization" in request.headers,
            )
            return unauthorized(request)

        request.state.user = user
        logger.info(
            "Authentication successful",
            backend=self.auth_backend.name(),
            user=user.username,
            path=request.url.path,
        )

        return await call_next(request)
