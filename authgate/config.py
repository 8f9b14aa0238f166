"""Configuration loader for authgate YAML files."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = "/etc/authgate/authgate.yaml"


class Config:
    """Read-only view over nested configuration with dotted-key lookups.

    ``Config({"auth": {"admins": {"role": "admin"}}}).get("auth.admins.role")``
    returns ``"admin"``.
    """

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data: Mapping[str, Any] = data or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under a dotted key."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def get_string(self, key: str, default: str = "") -> str:
        """Get a string value, empty values fall back to default."""
        value = self.get(key)
        if value is None or value == "":
            return default
        return str(value)

    def get_string_map(self, key: str) -> dict[str, str]:
        """Get a mapping with keys and values converted to strings."""
        value = self.get(key)
        if not isinstance(value, Mapping):
            if value is not None:
                logger.warning(
                    "Ignoring non-mapping configuration value",
                    key=key,
                    value_type=type(value).__name__,
                )
            return {}
        return {str(k): str(v) for k, v in value.items() if v is not None}


class ConfigLoader:
    """Loads and parses the authgate configuration file."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_PATH):
        self.config_file = Path(config_file)

    def load(self) -> Config:
        """Load the configuration from the YAML file."""
        if not self.config_file.exists():
            logger.warning("Config file does not exist", file=str(self.config_file))
            return Config()

        try:
            with open(self.config_file) as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(
                "Failed to load config file",
                file=str(self.config_file),
                error=str(e),
            )
            return Config()

        if not isinstance(content, Mapping):
            if content is not None:
                logger.error(
                    "Config file root is not a mapping", file=str(self.config_file)
                )
            return Config()

        return Config(content)


def get_config_loader() -> ConfigLoader:
    """Get configured config loader instance."""
    config_file = os.getenv("AUTHGATE_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    return ConfigLoader(config_file)
