"""Configuration module for bitbridge."""

from bitbridge.config.loader import get_config_path, load_config, save_config
from bitbridge.config.schema import Config, LoggingConfig, ServerConfig, SyncConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "ServerConfig",
    "SyncConfig",
    "get_config_path",
    "load_config",
    "save_config",
]
