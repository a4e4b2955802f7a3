"""Configuration module for strategy_conditions."""

from .settings import (
    Settings,
    LoggingConfig,
    CodecConfig,
    CatalogConfig,
    ConfigLoader,
    load_config,
    get_settings,
)

__all__ = [
    'Settings',
    'LoggingConfig',
    'CodecConfig',
    'CatalogConfig',
    'ConfigLoader',
    'load_config',
    'get_settings',
]
