"""Configuration persistence manager for the Image2Lcd converter.

This module handles loading and saving of conversion presets to/from JSON files.
"""

import json
import logging
from dataclasses import asdict, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple

from .exceptions import Image2LcdError
from .models import CONFIG_FILE, ConversionConfig

logger = logging.getLogger(__name__)


def config_to_dict(config: ConversionConfig) -> "dict[str, Any]":
    """Serialize a config to JSON-compatible values (enums by value)."""
    data = asdict(config)
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
        elif isinstance(value, bytes):
            data[key] = list(value)
    return data


def config_from_dict(data: "dict[str, Any]") -> ConversionConfig:
    """Build a config from a dict, ignoring keys it does not know.

    Raises:
        InvalidConfiguration: If a known key holds an invalid value
        UnsupportedFormat: If color_format is not a known format
    """
    known = {f.name for f in fields(ConversionConfig)}
    values = {key: value for key, value in data.items() if key in known}
    if values.get("custom_palette") is not None:
        values["custom_palette"] = bytes(values["custom_palette"])
    return ConversionConfig(**values)


class ConfigManager:
    """Handles loading and saving of conversion presets."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.image2lcd_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> ConversionConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            ConversionConfig with loaded or default values
        """
        if not self.config_path.exists():
            return ConversionConfig()

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level JSON value must be an object")
            config = config_from_dict(data)
        except (OSError, ValueError, TypeError, Image2LcdError) as e:
            logger.warning("Could not load config file %s: %s", self.config_path, e)
            return ConversionConfig()

        logger.info("Loaded configuration from %s", self.config_path)
        return config

    def save(self, config: ConversionConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: ConversionConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            with open(self.config_path, "w") as f:
                json.dump(config_to_dict(config), f, indent=2)
            return True, None
        except OSError as e:
            return False, str(e)
