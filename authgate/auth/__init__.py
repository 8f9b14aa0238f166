"""Pluggable HTTP authentication backends."""

from .basic import BasicAuthenticationBackend
from .exceptions import (
    AuthError,
    NoProviderConfiguredError,
    ProviderUnavailableError,
    UnknownBackendTypeError,
    WrongCredentialsError,
)
from .factory import (
    BACKEND_FACTORIES,
    DEFAULT_USER_ROLE,
    new_backend_from_config,
    new_basic_backend_from_config,
)
from .middleware import AuthenticationMiddleware
from .models import AuthenticationBackend, User
from .providers import (
    HtpasswdFileProvider,
    HtpasswdMapProvider,
    SecretProvider,
    verify_password,
)

__all__ = [
    "AuthError",
    "AuthenticationBackend",
    "AuthenticationMiddleware",
    "BACKEND_FACTORIES",
    "BasicAuthenticationBackend",
    "DEFAULT_USER_ROLE",
    "HtpasswdFileProvider",
    "HtpasswdMapProvider",
    "NoProviderConfiguredError",
    "ProviderUnavailableError",
    "SecretProvider",
    "UnknownBackendTypeError",
    "User",
    "WrongCredentialsError",
    "new_backend_from_config",
    "new_basic_backend_from_config",
    "verify_password",
]
