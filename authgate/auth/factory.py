"""Build authentication backends from named configuration.

Configuration keys, for a backend called ``<name>``:

    auth:
      <name>:
        type: basic              # optional, default "basic"
        role: admin              # optional, default DEFAULT_USER_ROLE
        file: /etc/authgate/htpasswd
        users:                   # used only when file is unset
          alice: $apr1$...
"""

from collections.abc import Callable

import structlog

from ..config import Config
from .basic import BasicAuthenticationBackend
from .exceptions import NoProviderConfiguredError, UnknownBackendTypeError
from .models import AuthenticationBackend
from .providers import HtpasswdFileProvider, HtpasswdMapProvider, SecretProvider

logger = structlog.get_logger()

DEFAULT_USER_ROLE = "admin"


def new_basic_backend_from_config(
    name: str, config: Config
) -> BasicAuthenticationBackend:
    """Build a Basic backend for the named configuration section.

    Raises:
        ProviderUnavailableError: If the configured htpasswd file is unusable
        NoProviderConfiguredError: If neither file nor users is configured
    """
    prefix = f"auth.{name}"
    role = config.get_string(f"{prefix}.role", DEFAULT_USER_ROLE)

    provider: SecretProvider
    users = config.get_string_map(f"{prefix}.users")
    if file := config.get_string(f"{prefix}.file"):
        if users:
            logger.warning(
                "Both file and users configured, using file",
                backend=name,
                file=file,
            )
        provider = HtpasswdFileProvider(file)
    elif users:
        provider = HtpasswdMapProvider(users)
    else:
        raise NoProviderConfiguredError(
            f"No htpasswd provider set for backend '{name}', "
            "set either the file or the users section"
        )

    logger.info(
        "Authentication backend created",
        backend=name,
        type="basic",
        provider=type(provider).__name__,
        role=role,
    )
    return BasicAuthenticationBackend(name, provider, role)


BACKEND_FACTORIES: dict[str, Callable[[str, Config], AuthenticationBackend]] = {
    "basic": new_basic_backend_from_config,
}


def new_backend_from_config(name: str, config: Config) -> AuthenticationBackend:
    """Build the backend whose type is set in ``auth.<name>.type``.

    Raises:
        UnknownBackendTypeError: If no factory is registered for the type
    """
    backend_type = config.get_string(f"auth.{name}.type", "basic").lower()
    factory = BACKEND_FACTORIES.get(backend_type)
    if factory is None:
        raise UnknownBackendTypeError(
            f"Unknown authentication backend type '{backend_type}' for '{name}'"
        )
    return factory(name, config)
