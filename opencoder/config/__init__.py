"""Configuration management for opencoder."""

from .manager import ConfigManager, Settings, create_config_manager
from .templates import CONFIG_TEMPLATE

__all__ = [
    "ConfigManager",
    "Settings",
    "create_config_manager",
    "CONFIG_TEMPLATE",
]
