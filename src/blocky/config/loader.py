"""
Configuration loader for Blocky
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict

import yaml

from ..utils.errors import ConfigurationError
from ..utils.process import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

# Maximum config file size (1MB should be plenty for YAML configs)
MAX_CONFIG_SIZE = 1024 * 1024

DEFAULT_ICONS = {
    "thermometer": "",
    "time": "",
}


class ConfigLoader:
    """Loads and validates YAML configuration files"""

    def load(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Validated configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is invalid or too large
            PermissionError: If config file is not readable
        """
        resolved_path = Path(config_path).expanduser().resolve()

        self._validate_config_path(resolved_path)

        if not resolved_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {resolved_path}")

        file_size = resolved_path.stat().st_size
        if file_size > MAX_CONFIG_SIZE:
            raise ConfigurationError(
                f"Configuration file too large: {file_size} bytes "
                f"(maximum {MAX_CONFIG_SIZE} bytes)"
            )

        try:
            with open(resolved_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except PermissionError as e:
            raise PermissionError(f"Cannot read configuration file: {e}") from e

        config = self.load_dict(config)
        logger.info(f"Loaded configuration from {resolved_path}")
        return config

    def load_dict(self, config: Any) -> Dict[str, Any]:
        """
        Validate an already-parsed configuration and apply defaults.

        Raises:
            ConfigurationError: If the structure is invalid
        """
        self._validate(config)
        return self._apply_defaults(config)

    def _validate_config_path(self, config_path: Path) -> None:
        """
        Validate that the configuration file path is safe to load.

        Args:
            config_path: Resolved absolute path to config file

        Raises:
            ConfigurationError: If path is not a regular file
        """
        if config_path.is_dir():
            raise ConfigurationError(f"Path is a directory, not a file: {config_path}")

        if config_path.suffix.lower() not in [".yaml", ".yml"]:
            logger.warning(
                f"Configuration file has unexpected extension: {config_path.suffix}. "
                f"Expected .yaml or .yml"
            )

        logger.debug(f"Configuration path validated: {config_path}")

    def _validate(self, config: Any) -> None:
        """Validate configuration structure"""
        if not isinstance(config, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        if "blocks" not in config:
            raise ConfigurationError("Configuration must have 'blocks' section")

        blocks = config["blocks"]
        if not isinstance(blocks, list) or not blocks:
            raise ConfigurationError("'blocks' must be a non-empty list")

        for index, block in enumerate(blocks, start=1):
            if not isinstance(block, dict):
                raise ConfigurationError(f"Block #{index} must be a dictionary")
            if not block.get("block"):
                raise ConfigurationError(f"Block #{index} is missing 'block' type")

        for section in ("settings", "icons", "theme"):
            if section in config and not isinstance(config[section], dict):
                raise ConfigurationError(f"'{section}' must be a dictionary")

        timeout = config.get("settings", {}).get("command_timeout")
        if timeout is not None:
            if (
                isinstance(timeout, bool)
                or not isinstance(timeout, (int, float))
                or not math.isfinite(timeout)
                or timeout <= 0
            ):
                raise ConfigurationError("'settings.command_timeout' must be a positive finite number")

    def _apply_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply default values to configuration"""
        settings = config.setdefault("settings", {})
        # An explicit null means the default, never an unbounded wait
        if settings.get("command_timeout") is None:
            settings["command_timeout"] = DEFAULT_TIMEOUT

        icons = config.setdefault("icons", {})
        for name, glyph in DEFAULT_ICONS.items():
            icons.setdefault(name, glyph)

        config.setdefault("theme", {})

        return config
