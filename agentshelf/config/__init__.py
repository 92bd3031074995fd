"""Configuration module."""
from .settings import (
    BotConfig,
    Config,
    DiscoveryConfig,
    RenderConfig,
    ValidationConfig,
    load_config,
)

__all__ = [
    "BotConfig",
    "Config",
    "DiscoveryConfig",
    "RenderConfig",
    "ValidationConfig",
    "load_config",
]
