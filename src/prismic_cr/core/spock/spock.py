"""Spock - Configuration Manager for prismic-cr.

Spock reads configuration from a JSON file, a config dict and environment
variables, and hands it to the transport factory.

Configuration sections:
- transport: Transport settings
  - uri: Endpoint URI, with a ``%s`` placeholder for the workspace name
  - access_token: Prismic access token
  - default_workspace: Workspace the ``default`` workspace maps to
  - check_login_on_server: Connect at login (true) or on first use (false)
  - timeout: HTTP timeout in seconds
- logging: Call logging settings
  - call_log: Wrap the transport in a LoggingTransport when true

Environment variables follow the naming convention:
PRISMIC_CR__<SECTION>__<KEY> (values are JSON-parsed when possible)
Example: PRISMIC_CR__TRANSPORT__URI="https://%s.cdn.prismic.io/api"
         PRISMIC_CR__TRANSPORT__CHECK_LOGIN_ON_SERVER=false
"""

import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class Spock:
    """Configuration manager.

    Famous quote from Spock in Star Trek:
    "Logic is the beginning of wisdom, not the end."
    """

    ENV_PREFIX = "PRISMIC_CR"
    ENV_SEPARATOR = "__"
    SECTIONS = ("transport", "logging")

    def __init__(self, config_path: str | None = None):
        """Initialize Spock configuration manager.

        Args:
            config_path: Path to JSON configuration file. If None, only
                        environment variables and config dicts are used.
        """
        self._config_path = config_path
        self._config = self.default_config()
        self._loaded = False
        logger.debug("Spock instance created with config_path=%s", config_path)

    @classmethod
    def default_config(cls) -> dict[str, Any]:
        """Return a new default config dict each time."""
        return {section: {} for section in cls.SECTIONS}

    def load(self, config: dict[str, Any] | None = None) -> None:
        """Load configuration.

        Args:
            config: Optional config dict merged over the JSON file.

        Priority (highest to lowest):
        1. Environment variables
        2. Provided config (if any)
        3. JSON file
        4. Default values
        """
        if self._loaded:
            logger.debug("Configuration already loaded, skipping reload")
            return

        self._config = self.default_config()

        if self._config_path:
            self._load_from_json()

        if config is not None:
            self._merge_sections(config, "Configuration")

        self._load_from_env()

        self._loaded = True
        logger.info("Configuration loaded successfully")
        logger.debug(
            "Final config structure: transport keys=%s, logging keys=%s",
            list(self._config["transport"].keys()),
            list(self._config["logging"].keys()),
        )

    def _load_from_json(self) -> None:
        """Load configuration from JSON file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s", self._config_path)
            return

        try:
            with open(config_file, encoding="utf-8") as f:
                json_config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in config file %s: %s", self._config_path, e)
            raise ValueError(f"Invalid JSON configuration file: {e}") from e

        self._merge_sections(json_config, "Configuration file")
        logger.info("Loaded configuration from JSON: %s", self._config_path)

    def _merge_sections(self, config: Any, origin: str) -> None:
        """Validate known sections of a config object and merge them in."""
        if not isinstance(config, dict):
            raise ValueError(f"{origin} must be an object")

        for section in self.SECTIONS:
            if section not in config:
                continue
            if not isinstance(config[section], dict):
                raise ValueError(f"'{section}' section must be an object")
            self._config[section].update(deepcopy(config[section]))

        unknown = set(config) - set(self.SECTIONS)
        if unknown:
            logger.warning("Ignoring unknown configuration sections: %s", sorted(unknown))

    def _load_from_env(self) -> None:
        """Load configuration from environment variables.

        Environment variables follow the pattern:
        PRISMIC_CR__<SECTION>__<KEY>__<SUBKEY>...

        Examples:
        - PRISMIC_CR__TRANSPORT__ACCESS_TOKEN=MC5VbG...
        - PRISMIC_CR__TRANSPORT__TIMEOUT=10
        - PRISMIC_CR__LOGGING__CALL_LOG=true
        """
        prefix = f"{self.ENV_PREFIX}{self.ENV_SEPARATOR}"

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(prefix):
                continue

            key_path = env_key[len(prefix) :].split(self.ENV_SEPARATOR)
            if len(key_path) < 2:
                logger.warning("Invalid env var format (too short): %s", env_key)
                continue

            section = key_path[0].lower()
            if section not in self.SECTIONS:
                logger.warning("Invalid section in env var %s: %s", env_key, section)
                continue

            parsed_value = self._parse_env_value(env_value)
            try:
                self._set_nested_value(section, key_path[1:], parsed_value)
            except TypeError as e:
                logger.error("Error processing env var %s: %s", env_key, e)
                continue
            logger.debug("Set from env: %s", env_key)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value with type inference.

        Attempts to parse as JSON first, falls back to string.
        """
        try:
            return json.loads(value)
        except ValueError:
            return value

    def _set_nested_value(self, section: str, path: list[str], value: Any) -> None:
        """Set a value in a section; keys are lower-cased."""
        target = self._config[section]
        for key in path[:-1]:
            key_lower = key.lower()
            if key_lower not in target:
                target[key_lower] = {}
            target = target[key_lower]
            if not isinstance(target, dict):
                raise TypeError(f"'{key_lower}' is not an object")
        target[path[-1].lower()] = value

    def get_section(self, section: str, key: str | None = None, default: Any = None) -> Any:
        """Get a configuration section, or one key of it.

        Raises:
            KeyError: If the section is unknown.
        """
        if section not in self.SECTIONS:
            raise KeyError(f"Unknown configuration section '{section}'")
        if not self._loaded:
            self.load()

        if key is None:
            return deepcopy(self._config[section])
        return self._config[section].get(key, default)

    def get_transport_config(self, key: str | None = None, default: Any = None) -> Any:
        """Get transport configuration."""
        return self.get_section("transport", key, default)

    def get_logging_config(self, key: str | None = None, default: Any = None) -> Any:
        """Get call logging configuration."""
        return self.get_section("logging", key, default)

    def set_transport_config(self, key: str, value: Any) -> None:
        """Set transport configuration (runtime only, not persisted)."""
        if not self._loaded:
            self.load()
        self._config["transport"][key] = value
        logger.debug("Set transport config: %s", key)

    def get_all_config(self) -> dict[str, Any]:
        """Get complete configuration snapshot."""
        if not self._loaded:
            self.load()
        return deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from sources."""
        self._loaded = False
        self.load()
        logger.info("Configuration reloaded")

    @property
    def config_path(self) -> str | None:
        """Get the configuration file path."""
        return self._config_path

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._loaded


ConfigManager = Spock
