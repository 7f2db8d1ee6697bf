"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from didchain.config import settings, get_evm_settings

    print(settings.mode)
    print(get_evm_settings().network_url)
"""

from didchain.config.properties import load_properties, parse_properties
from didchain.config.settings import (
    EvmSettings,
    FabricSettings,
    LedgerMode,
    LedgerSettings,
    LogLevel,
    get_evm_settings,
    get_fabric_settings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "LedgerSettings",
    "EvmSettings",
    "FabricSettings",
    "get_settings",
    "get_evm_settings",
    "get_fabric_settings",
    "settings",
    "LedgerMode",
    "LogLevel",
    "load_properties",
    "parse_properties",
]
