"""Configuration management."""

from typing import Dict, Any, Optional
from pathlib import Path
import json
import logging

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "step_progress.json"


class Config:
    """Tracker defaults stored in a JSON file."""

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else Path(DEFAULT_CONFIG_FILE)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        self._config = self._get_default_config()
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, 'r') as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {self.config_file}: {e}")
            self._config = {}
            return

        if not isinstance(loaded, dict):
            logger.warning(f"Ignoring config file {self.config_file}: top level is not an object")
            self._config = {}
            return

        self._config.update(loaded)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "block_count": 30,
            "label": "Progress",
            "mode": "regular",
            "smooth": True,
            "delay": 0.05
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self._config[key] = value

    def items(self) -> Dict[str, Any]:
        """Return a copy of all configuration values."""
        return dict(self._config)

    def save(self) -> None:
        """Save configuration to file."""
        with open(self.config_file, 'w') as f:
            json.dump(self._config, f, indent=2)
