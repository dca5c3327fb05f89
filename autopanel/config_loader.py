"""
================================================================================
Configuration
================================================================================

Settings for browser sessions, element lookup, screenshots and logging.

Values come from three places, highest priority first:
    1. Environment variables named after the dotted key
       (``browser.base_url`` -> ``BROWSER_BASE_URL``)
    2. ``config/autopanel.yaml``, or the file named by ``AUTOPANEL_CONFIG``
    3. ``DEFAULTS`` below

Environment values are strings; they are converted to the type of the
default they replace.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from .errors import ConfigurationError


CONFIG_PATH_ENV = "AUTOPANEL_CONFIG"

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "autopanel.yaml"

DEFAULTS: Dict[str, Any] = {
    "browser.base_url": "http://localhost:8080",
    "browser.type": "chromium",
    "browser.headless": True,
    "finder.strategy": "impatient",
    "finder.timeout": 5000,
    "finder.max_attempts": 3,
    "screenshots.dir": "build",
    "screenshots.on_error": True,
    "logging.level": "INFO",
}

_TRUTHY = frozenset({"true", "1", "yes", "on"})

_MISSING = object()


class ConfigLoader:
    """
    Process-wide settings, loaded once.

    Usage:
        >>> ConfigLoader().get("browser.type")
        'chromium'
        >>> ConfigLoader().get("finder.poll_interval", 100)
        100
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialized = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Args:
            config_path: YAML file to read. Only honoured by the first
                construction after ``reset()``.
        """
        if self._initialized:
            return

        self._config_path = Path(
            config_path or os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
        )
        self._sections: Dict[str, Any] = self._read_file(self._config_path)
        self._initialized = True

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            logger.debug(f"No configuration file at {path}, using defaults")
            return {}

        try:
            content = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        logger.debug(f"Loaded configuration from {path}")
        return content or {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key.

        Args:
            key: e.g. "screenshots.dir"
            default: Returned when the key is set nowhere. Falls back to
                ``DEFAULTS[key]`` when omitted.
        """
        fallback = DEFAULTS.get(key) if default is None else default

        env_value = os.environ.get(key.upper().replace(".", "_"))
        if env_value is not None:
            return self._coerce(env_value, fallback)

        value = self._lookup(key)
        return fallback if value is _MISSING else value

    def _lookup(self, key: str) -> Any:
        node: Any = self._sections
        for part in key.split("."):
            if not isinstance(node, dict) or node.get(part) is None:
                return _MISSING
            node = node[part]
        return node

    def get_section(self, section: str) -> Dict[str, Any]:
        """Raw YAML mapping of one top-level section (no env overrides)."""
        return dict(self._sections.get(section) or {})

    def reload(self) -> None:
        """Re-read the YAML file."""
        self._sections = self._read_file(self._config_path)
        logger.info(f"Configuration reloaded from {self._config_path}")

    @staticmethod
    def _coerce(raw: str, reference: Any) -> Any:
        # bool before int: bool is an int subclass
        if isinstance(reference, bool):
            return raw.strip().lower() in _TRUTHY
        for kind in (int, float):
            if isinstance(reference, kind):
                try:
                    return kind(raw)
                except ValueError:
                    logger.warning(f"Cannot read {raw!r} as {kind.__name__}, keeping the string")
                    return raw
        return raw

    @classmethod
    def reset(cls) -> None:
        """Drop the loaded instance (tests)."""
        cls._instance = None


__all__ = [
    "ConfigLoader",
    "DEFAULTS",
    "DEFAULT_CONFIG_PATH",
]
