"""
Configuration utility for the scraper.
"""

import copy
import json
import logging
import os
import threading
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "network": {
        "timeout": 30,
        "max_retries": 3,
        "backoff_factor": 0.5,
        "user_agent": "html-scraper/1.0"
    },
    "parser": {
        "default_encoding": "utf-8"
    }
}


def get_default_config_path() -> str:
    """Get the default config file path, ~/.scraper/config.json."""
    return os.path.join(os.path.expanduser("~"), ".scraper", "config.json")


class Config:
    """Configuration manager for the scraper."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the config file
        """
        self.config_path = config_path or get_default_config_path()
        self.config: Dict[str, Any] = {}
        self._lock = threading.Lock()

        self.load()

        logger.debug(f"Configuration initialized (config_path: {self.config_path})")

    def load(self) -> None:
        """Load configuration from file, falling back to defaults."""
        if not os.path.exists(self.config_path):
            logger.debug(f"Configuration file not found at {self.config_path}, using defaults")
            self._set_defaults()
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration: {e}")
            self._set_defaults()
            return

        if not isinstance(loaded, dict):
            logger.error(f"Configuration in {self.config_path} is not an object, using defaults")
            self._set_defaults()
            return

        with self._lock:
            self.config = self._merge(copy.deepcopy(DEFAULT_CONFIG), loaded)
        logger.debug(f"Configuration loaded from {self.config_path}")

    def _parent(self, key: str, create: bool = False) -> Tuple[Optional[Dict[str, Any]], str]:
        """
        Find the section holding a dotted key.

        Args:
            key: Dotted key, e.g. 'network.timeout'
            create: Create missing (or non-object) sections on the way

        Returns:
            The section (None if it does not exist) and the last key part
        """
        *sections, leaf = key.split('.')
        section = self.config
        for name in sections:
            child = section.get(name)
            if not isinstance(child, dict):
                if not create:
                    return None, leaf
                child = section[name] = {}
            section = child
        return section, leaf

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dotted key, e.g. 'network.timeout'
            default: Value returned when the key is missing

        Returns:
            The configured value, or ``default``
        """
        with self._lock:
            section, leaf = self._parent(key)
            if section is None:
                return default
            return section.get(leaf, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value, creating sections as needed."""
        with self._lock:
            section, leaf = self._parent(key, create=True)
            section[leaf] = value

    def _set_defaults(self) -> None:
        with self._lock:
            self.config = copy.deepcopy(DEFAULT_CONFIG)

        logger.debug("Default configuration set")

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge ``override`` into ``base``."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                cls._merge(base[key], value)
            else:
                base[key] = value
        return base
