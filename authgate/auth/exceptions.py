"""Authentication error kinds."""


class AuthError(Exception):
    """Base class for authentication errors."""


class WrongCredentialsError(AuthError):
    """Username/password pair does not validate."""

    def __init__(self, message: str = "Wrong credentials"):
        super().__init__(message)


class ProviderUnavailableError(AuthError):
    """Secret provider cannot be constructed (e.g. unreadable htpasswd file)."""


class NoProviderConfiguredError(AuthError):
    """Backend configuration sets neither a password file nor inline users."""


class UnknownBackendTypeError(AuthError):
    """Backend configuration names a type no factory is registered for."""
