"""
Configuration management for 2D25D.

Loads simplification, offset and pipeline defaults from JSON files.
The projection constants are not configurable: there is exactly one
canonical axonometric transform (see d25d.rendering.projection).
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from d25d.core.exceptions import ConfigurationError


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "axon_defaults.json"


class Config:
    """Configuration manager for pipeline defaults."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to JSON config file. If None, uses the bundled defaults.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Config file not found: {self.config_path}",
                {"path": str(self.config_path)},
            )

        try:
            with open(self.config_path, 'r') as f:
                self._config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Config file is not valid JSON: {self.config_path}",
                {"path": str(self.config_path), "error": str(e)},
            ) from e

        if not isinstance(self._config, dict):
            raise ConfigurationError(
                f"Config root must be an object: {self.config_path}",
                {"path": str(self.config_path)},
            )

        logger.info(f"Loaded config: {self._config.get('name', 'Unknown')}")

    @property
    def name(self) -> str:
        return self._config.get("name", "Unknown")

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get a whole config section.

        Args:
            section: Section name ('simplification', 'offset', 'pipeline', ...)

        Returns:
            Copy of the section (empty if missing)
        """
        return dict(self._config.get(section, {}))

    def get_value(self, section: str, name: str, default: Any = None) -> Any:
        """
        Get a single value from a section.

        Args:
            section: Section name
            name: Key inside the section
            default: Default value if not found

        Returns:
            Configured value or default
        """
        return self._config.get(section, {}).get(name, default)

    def simplify_options(self):
        """Simplification options built from the 'simplification' section."""
        from d25d.simplification.path_simplifier import SimplifyOptions

        return SimplifyOptions.model_validate(self.get_section("simplification"))

    @property
    def miter_limit(self) -> float:
        return float(self.get_value("offset", "miter_limit", 4.0))

    @property
    def max_workers(self) -> int:
        return int(self.get_value("pipeline", "max_workers", 1))


# Global default config instance
_default_config: Optional[Config] = None


def get_default_config() -> Config:
    """Get the default global configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = Config()
    return _default_config


def load_config(config_path: str) -> Config:
    """
    Load configuration from a specific file.

    Args:
        config_path: Path to JSON config file

    Returns:
        Config instance
    """
    return Config(config_path)
