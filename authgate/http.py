"""HTTP helpers shared by authentication backends."""

import base64
import binascii

import structlog
from starlette.requests import HTTPConnection
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()

AUTH_REALM = "Authgate Authentication"
AUTH_COOKIE = "authtok"


def encode_credentials(username: str, password: str) -> str:
    """Encode a credential pair as the Basic token base64(username:password)."""
    return base64.b64encode(f"{username}:{password}".encode()).decode("ascii")


def decode_credentials(token: str) -> tuple[str, str]:
    """Decode a Basic token into a (username, password) pair.

    Raises:
        ValueError: If the token is not base64 of ``username:password``
    """
    try:
        decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError(f"Malformed basic credentials: {e}") from e

    username, sep, password = decoded.partition(":")
    if not sep:
        raise ValueError("Malformed basic credentials: missing ':' separator")
    return username, password


def extract_credentials(request: HTTPConnection) -> tuple[str, str] | None:
    """Get a username/password pair from request headers.

    Reads ``Authorization: Basic <token>`` and falls back to the token cookie.
    Returns None when neither is present or the token cannot be decoded.
    """
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header:
        scheme, _, credentials = auth_header.partition(" ")
        if scheme.lower() != "basic":
            return None
        token = credentials
    else:
        token = request.cookies.get(AUTH_COOKIE)

    if not token:
        return None

    try:
        return decode_credentials(token)
    except ValueError as e:
        logger.debug("Ignoring malformed credentials", error=str(e))
        return None


def unauthorized(request: HTTPConnection) -> Response:
    """Build the 401 response returned for failed authentication."""
    return JSONResponse(
        status_code=401,
        content={"error": "Authentication required"},
        headers={"WWW-Authenticate": f'Basic realm="{AUTH_REALM}"'},
    )
