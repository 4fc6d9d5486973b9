"""Configuration module for the tax guide engine."""

from .settings import EngineSettings, get_settings
from .tax_config_loader import (
    ConfigMetadata,
    TaxConfigError,
    TaxConfigLoader,
    clear_config_cache,
    get_config_loader,
)

__all__ = [
    "EngineSettings",
    "get_settings",
    "ConfigMetadata",
    "TaxConfigError",
    "TaxConfigLoader",
    "clear_config_cache",
    "get_config_loader",
]
