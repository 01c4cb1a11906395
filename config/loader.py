"""Configuration loader for the Copilot Interceptor proxy

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')


class ConfigLoader:
    """Resolves typed configuration values from the environment"""

    def __init__(self, env_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        The raw environment string is coerced to the type of ``default``
        (bool, int, float, dict). Dicts are read as a JSON object. Paths
        starting with ``~/`` are expanded.

        Args:
            env_var: Environment variable name to check
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        env_value = os.getenv(env_var)
        if env_value is None:
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(default).expanduser())
            return default
        return self._coerce(env_var, env_value, default)

    def get_choice(self, env_var: str, default: str, choices: Iterable[str]) -> str:
        """Get a string value restricted to a fixed set of choices

        Unknown values are logged and replaced with ``default``.
        """
        value = str(self.get(env_var, default)).strip().lower()
        allowed = {choice.lower() for choice in choices}
        if value not in allowed:
            logger.warning(f"Unsupported {env_var}={value!r}, expected one of {sorted(allowed)}; using default: {default}")
            return default
        return value

    @staticmethod
    def _coerce(env_var: str, env_value: str, default: Any) -> Any:
        # bool must be checked before int (bool is an int subclass)
        if isinstance(default, bool):
            return env_value.strip().lower() in _TRUE_VALUES
        if isinstance(default, dict):
            try:
                parsed = json.loads(env_value)
            except json.JSONDecodeError as e:
                logger.warning(f"Failed to parse {env_var} as JSON: {e}, using default: {default}")
                return default
            if not isinstance(parsed, dict):
                logger.warning(f"{env_var} must be a JSON object, using default: {default}")
                return default
            return parsed
        for kind in (int, float):
            if isinstance(default, kind):
                try:
                    return kind(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as {kind.__name__}, using default: {default}")
                    return default
        return env_value


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
