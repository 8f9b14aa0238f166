"""Secret providers resolving usernames to htpasswd secret records.

Two storage shapes sit behind the same ``lookup`` capability:

- ``HtpasswdFileProvider`` reads an Apache htpasswd file and re-reads it when
  the file changes on disk.
- ``HtpasswdMapProvider`` wraps a static mapping supplied by configuration.

Both return the raw stored secret. Password comparison happens in exactly one
place, ``verify_password``, using the htpasswd ``CryptContext`` from passlib,
so bcrypt, apr1, ``{SHA}``, crypt and plaintext records behave the same
whichever provider holds them.
"""

import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import structlog
from passlib.apache import htpasswd_context
from passlib.exc import MissingBackendError

from .exceptions import ProviderUnavailableError

logger = structlog.get_logger()


class SecretProvider(Protocol):
    """Protocol for secret providers."""

    def lookup(self, username: str) -> str | None:
        """Return the stored secret for username, or None if unknown."""
        ...


def parse_htpasswd(content: str) -> dict[str, str]:
    """Parse htpasswd content into a username -> secret mapping.

    Lines that do not hold a ``username:secret`` record are skipped.
    """
    records: dict[str, str] = {}
    for lineno, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        username, sep, secret = line.partition(":")
        if not sep or not username or not secret:
            logger.debug("Skipping malformed htpasswd line", lineno=lineno)
            continue

        records[username] = secret
    return records


class HtpasswdFileProvider:
    """Secret provider backed by an htpasswd file.

    The file is parsed at construction. Each lookup stats the file and, when
    its modification time or size changed, reads it again in a single call and
    swaps the parsed records in under a lock.
    """

    def __init__(self, path: str | Path):
        """Initialize the provider.

        Args:
            path: Path to the htpasswd file

        Raises:
            ProviderUnavailableError: If the file does not exist or cannot be read
        """
        self.path = Path(path)
        self._lock = threading.Lock()
        self._records: dict[str, str] = {}
        self._signature: tuple[int, int] | None = None

        if not self.path.is_file():
            raise ProviderUnavailableError(f"htpasswd file not found: {self.path}")

        try:
            self._reload(self._stat_signature())
        except OSError as e:
            raise ProviderUnavailableError(
                f"htpasswd file not readable: {self.path}: {e}"
            ) from e

        logger.info(
            "Loaded htpasswd file", path=str(self.path), users=len(self._records)
        )

    def _stat_signature(self) -> tuple[int, int]:
        stat = self.path.stat()
        return stat.st_mtime_ns, stat.st_size

    def _reload(self, signature: tuple[int, int]) -> None:
        content = self.path.read_text(encoding="utf-8", errors="replace")
        records = parse_htpasswd(content)
        self._records = records
        self._signature = signature

    def _refresh_if_changed(self) -> None:
        try:
            signature = self._stat_signature()
        except OSError as e:
            logger.warning(
                "htpasswd file unavailable, keeping previous records",
                path=str(self.path),
                error=str(e),
            )
            return

        if signature == self._signature:
            return

        with self._lock:
            # Another thread may have reloaded while we waited
            if signature == self._signature:
                return
            try:
                self._reload(signature)
            except OSError as e:
                logger.warning(
                    "Failed to reload htpasswd file, keeping previous records",
                    path=str(self.path),
                    error=str(e),
                )
                return

        logger.info(
            "Reloaded htpasswd file", path=str(self.path), users=len(self._records)
        )

    def lookup(self, username: str) -> str | None:
        self._refresh_if_changed()
        return self._records.get(username)


class HtpasswdMapProvider:
    """Secret provider backed by a static username -> secret mapping."""

    def __init__(self, users: Mapping[str, str]):
        if not users:
            raise ProviderUnavailableError("No users defined for htpasswd map provider")
        self._users = {str(user): str(secret) for user, secret in users.items()}

    def lookup(self, username: str) -> str | None:
        return self._users.get(username)


def verify_password(provider: SecretProvider, username: str, password: str) -> bool:
    """Check password against the secret stored for username.

    An unknown username goes through a dummy verification and returns False,
    the same outcome as a known username with a wrong password.
    """
    secret = provider.lookup(username)
    if secret is None:
        htpasswd_context.dummy_verify()
        return False

    try:
        return bool(htpasswd_context.verify(password, secret))
    except (ValueError, TypeError):
        logger.warning("Unusable secret record", username=username)
        return False
    except MissingBackendError as e:
        logger.error(
            "No backend available to verify secret",
            username=username,
            error=str(e),
        )
        return False
