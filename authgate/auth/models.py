"""Authentication models and types."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from starlette.requests import Request
from starlette.responses import Response

Handler = Callable[[Request], Awaitable[Response] | Response]


@dataclass(frozen=True)
class User:
    """User information from authentication."""

    username: str
    role: str
    backend: str
    auth_method: str


class AuthenticationBackend(Protocol):
    """Protocol for authentication backends."""

    def name(self) -> str:
        """Return the backend name used for configuration lookup and logging."""
        ...

    def default_user_role(self, user: str) -> str:
        """Return the role assigned to an authenticated user."""
        ...

    def set_default_user_role(self, role: str) -> None:
        """Replace the backend-wide default role."""
        ...

    def authenticate(self, username: str, password: str) -> str:
        """Validate a credential pair and return a reusable opaque token.

        Raises:
            WrongCredentialsError: If the pair does not validate.
        """
        ...

    async def authenticate_request(self, request: Any) -> User | None:
        """Authenticate a request and return user info or None if authentication fails."""
        ...

    def wrap(self, handler: Handler) -> Callable[[Request], Awaitable[Response]]:
        """Return an endpoint that only calls handler for authenticated requests."""
        ...
