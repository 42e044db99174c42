"""
Configuration management for usb-strings.

Handles loading, validation, and access to discovery and transfer settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from usbstrings.descriptors.constants import (
    COMPLETION_TIMEOUT_MS,
    DEFAULT_PLACEHOLDER,
    LANGID_ENGLISH_US,
    SETUP_TIMEOUT_MS,
)
from usbstrings.descriptors.transfer import TransferTimeouts


# Default configuration path
DEFAULT_CONFIG_PATH = Path("/etc/usb-strings/usb-strings.yaml")

# Black Magic Probe
DEFAULT_VENDOR_ID = 0x1D50
DEFAULT_PRODUCT_ID = 0x6018


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"

    def __post_init__(self) -> None:
        # Environment wins over the file
        env_level = os.environ.get("USB_STRINGS_LOG_LEVEL")
        if env_level:
            self.level = env_level.lower()


@dataclass
class DiscoveryConfig:
    """
    Which devices to look up.

    IDs written as YAML integers are read as YAML reads them, so hex
    needs the 0x prefix (product_id: 0x6018). Quoted strings are always
    hex ("6018" and "0x6018" are the same ID).
    """

    vendor_id: int = DEFAULT_VENDOR_ID
    product_id: int = DEFAULT_PRODUCT_ID

    def __post_init__(self) -> None:
        # Accept "1d50" / "0x1d50" strings from YAML or the command line
        if isinstance(self.vendor_id, str):
            self.vendor_id = int(self.vendor_id, 16)
        if isinstance(self.product_id, str):
            self.product_id = int(self.product_id, 16)


@dataclass
class TransferConfig:
    """Control transfer settings."""

    language_id: int = LANGID_ENGLISH_US
    setup_timeout_ms: int = SETUP_TIMEOUT_MS
    completion_timeout_ms: int = COMPLETION_TIMEOUT_MS

    @property
    def timeouts(self) -> TransferTimeouts:
        return TransferTimeouts(
            setup_ms=self.setup_timeout_ms,
            completion_ms=self.completion_timeout_ms,
        )


@dataclass
class DisplayConfig:
    """Output settings."""

    placeholder: str = DEFAULT_PLACEHOLDER


@dataclass
class StringsConfig:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    transfer: TransferConfig = field(default_factory=TransferConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StringsConfig:
        """Create configuration from dictionary."""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            discovery=DiscoveryConfig(**data.get("discovery", {})),
            transfer=TransferConfig(**data.get("transfer", {})),
            display=DisplayConfig(**data.get("display", {})),
        )


CONFIG_SEARCH_PATHS = (
    DEFAULT_CONFIG_PATH,
    Path("config/usb-strings.yaml"),
    Path("usb-strings.yaml"),
)


def find_config_path() -> Path | None:
    """Return the first existing file from CONFIG_SEARCH_PATHS, if any."""
    # System-wide file first, then the working directory
    return next((p for p in CONFIG_SEARCH_PATHS if p.is_file()), None)


def load_config(path: str | Path | None = None) -> StringsConfig:
    """
    Load configuration from YAML file.

    Args:
        path: Path to configuration file. If None, uses default paths.

    Returns:
        StringsConfig instance with loaded settings.

    Raises:
        FileNotFoundError: If an explicit config file does not exist.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if path is None:
        path = find_config_path()
        if path is None:
            # Nothing on disk, run on built-in defaults
            return StringsConfig()

    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return StringsConfig.from_dict(data)


def validate_config(config: StringsConfig) -> list[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate.

    Returns:
        List of error messages. Empty list if valid.
    """
    errors: list[str] = []

    valid_log_levels = {"debug", "info", "warning", "error"}
    if config.logging.level not in valid_log_levels:
        errors.append(f"Invalid log level: {config.logging.level}")

    if not (0 <= config.discovery.vendor_id <= 0xFFFF):
        errors.append(f"Invalid vendor_id: {config.discovery.vendor_id}")
    if not (0 <= config.discovery.product_id <= 0xFFFF):
        errors.append(f"Invalid product_id: {config.discovery.product_id}")

    if not (0 <= config.transfer.language_id <= 0xFFFF):
        errors.append(f"Invalid language_id: {config.transfer.language_id}")
    if config.transfer.setup_timeout_ms <= 0:
        errors.append(f"Invalid setup timeout: {config.transfer.setup_timeout_ms}")
    if config.transfer.completion_timeout_ms <= 0:
        errors.append(
            f"Invalid completion timeout: {config.transfer.completion_timeout_ms}"
        )

    if not config.display.placeholder:
        errors.append("Placeholder text must not be empty")

    return errors
