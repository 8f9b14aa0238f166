"""HTTP Basic authentication backend."""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

import structlog
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from ..http import encode_credentials, extract_credentials, unauthorized
from .exceptions import WrongCredentialsError
from .models import AuthenticationBackend, Handler, User
from .providers import SecretProvider, verify_password

logger = structlog.get_logger()


class BasicAuthenticationBackend(AuthenticationBackend):
    """Authentication backend for ``Authorization: Basic`` credentials.

    Validates username/password pairs against a secret provider. Every path
    (explicit ``authenticate`` calls, wrapped endpoints, the middleware) goes
    through ``check_credentials``.
    """

    auth_method = "basic"

    def __init__(self, name: str, provider: SecretProvider, role: str):
        """Initialize the backend.

        Args:
            name: Backend name used for configuration lookup and logging
            provider: Secret provider holding the user records
            role: Default role given to authenticated users
        """
        self._name = name
        self.provider = provider
        self._role = role

    def name(self) -> str:
        return self._name

    def default_user_role(self, user: str) -> str:
        return self._role

    def set_default_user_role(self, role: str) -> None:
        self._role = role
        logger.info("Default user role changed", backend=self._name, role=role)

    def check_credentials(self, username: str, password: str) -> str | None:
        """Return username if the pair validates, None otherwise."""
        if verify_password(self.provider, username, password):
            return username
        return None

    def authenticate(self, username: str, password: str) -> str:
        """Validate a credential pair and return its Basic token.

        Raises:
            WrongCredentialsError: If the pair does not validate
        """
        if self.check_credentials(username, password) is None:
            logger.warning(
                "Authentication failed", backend=self._name, username=username
            )
            raise WrongCredentialsError()
        return encode_credentials(username, password)

    async def authenticate_request(self, request: Any) -> User | None:
        credentials = extract_credentials(request)
        if credentials is None:
            return None

        username = await run_in_threadpool(self.check_credentials, *credentials)
        if username is None:
            return None

        return User(
            username=username,
            role=self.default_user_role(username),
            backend=self._name,
            auth_method=self.auth_method,
        )

    def wrap(self, handler: Handler) -> Callable[[Request], Awaitable[Response]]:
        """Wrap a Starlette endpoint so only authenticated requests reach it.

        The authenticated user is stored in ``request.state.user``. Failed
        authentication returns the 401 response without calling handler.
        """
        # Endpoint classes define an async __call__ instead of being coroutine functions
        is_async = inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
            getattr(handler, "__call__", None)
        )

        @wraps(handler)
        async def wrapper(request: Request) -> Response:
            user = await self.authenticate_request(request)
            if user is None:
                logger.warning(
                    "Authentication failed",
                    backend=self._name,
                    path=request.url.path,
                    has_auth_header="authorization" in request.headers,
                )
                return unauthorized(request)

            request.state.user = user
            logger.debug(
                "Authentication successful",
                backend=self._name,
                user=user.username,
                path=request.url.path,
            )

            if is_async:
                return await handler(request)  # type: ignore[misc]
            return await run_in_threadpool(handler, request)  # type: ignore[arg-type]

        return wrapper
