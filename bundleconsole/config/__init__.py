"""Configuration system for bundleconsole."""

from .config import (
    ConsoleConfig,
    FrameworkConfig,
    LoggingConfig,
    SecurityConfig,
    ServerConfig,
    load_config,
    save_config,
)

__all__ = [
    "ConsoleConfig",
    "FrameworkConfig",
    "LoggingConfig",
    "SecurityConfig",
    "ServerConfig",
    "load_config",
    "save_config",
]
