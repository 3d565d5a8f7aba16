"""
Configuration loading and models for bundleconsole.

Version: 0.2.0
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from bundleconsole.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "bundleconsole.yaml"


@dataclass
class ServerConfig:
    """Configuration for the API server."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        path: Log file destination path, None for console only.
        reset_on_start: If True, delete log file on startup. If False, add separator.
    """

    level: str = "INFO"
    path: Optional[str] = None
    reset_on_start: bool = True


@dataclass
class FrameworkConfig:
    """How to reach the module framework.

    Attributes:
        boot_delegation: Value of the framework's boot delegation property,
            e.g. ``"sun.*,com.sun.*"``. ``java.*`` is always added.
        snapshot: YAML runtime snapshot served by the snapshot registry.
    """

    boot_delegation: Optional[str] = None
    snapshot: Optional[str] = None


@dataclass
class SecurityConfig:
    """Configuration for security."""

    token: Optional[str] = None


@dataclass
class ConsoleConfig:
    """Global configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    framework: FrameworkConfig = field(default_factory=FrameworkConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConsoleConfig:
        """Create a config object from a dictionary.

        Unknown keys are ignored so older files keep loading.
        """
        def section(name: str, model: type) -> Any:
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ConfigError(f"Section '{name}' must be a mapping")
            known = model.__dataclass_fields__
            return model(**{k: v for k, v in values.items() if k in known})

        return cls(
            server=section("server", ServerConfig),
            logging=section("logging", LoggingConfig),
            framework=section("framework", FrameworkConfig),
            security=section("security", SecurityConfig),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_config_path(root_path: Path, config_file: str | None = None) -> Path:
    if config_file:
        path = Path(config_file)
        return path if path.is_absolute() else root_path / path
    return root_path / CONFIG_FILE_NAME


def load_config(root_path: Path, config_file: str | None = None) -> ConsoleConfig:
    """Load configuration from a YAML file; a missing file means defaults.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    config_path = get_config_path(root_path, config_file)

    if not config_path.is_file():
        logger.debug("No config file found at %s, using defaults.", config_path)
        return ConsoleConfig()

    logger.info("Loading config from %s", config_path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}", path=str(config_path)) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", path=str(config_path)) from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must be a YAML mapping", path=str(config_path))

    try:
        return ConsoleConfig.from_dict(data)
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}", path=str(config_path)) from e


def save_config(config: ConsoleConfig, root_path: Path, config_file: str | None = None) -> Path:
    """Write ``config`` as YAML and return the file path."""
    config_path = get_config_path(root_path, config_file)
    try:
        with config_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
        logger.info("Saved config to %s", config_path)
    except OSError as e:
        logger.error("Failed to save config file: %s", e)
        raise
    return config_path
