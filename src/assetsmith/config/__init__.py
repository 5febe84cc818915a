"""Configuration management for assetsmith.

This module provides configuration management using Pydantic models.
Configuration is built from CLI arguments or defaults and passed explicitly
into every component.

Key classes:
- HighlightConfig: Outline thickness, color and overwrite policy
- ProcessingConfig: Worker pool settings
- SyncConfig: Registry and image locations
- LoggingConfig: Logging settings
- AssetsmithSettings: Main application settings
"""

from assetsmith.config.settings import (
    WHITE,
    AssetsmithSettings,
    HighlightConfig,
    LoggingConfig,
    ProcessingConfig,
    SyncConfig,
    get_default_settings,
)

__all__ = [
    "WHITE",
    "AssetsmithSettings",
    "HighlightConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "SyncConfig",
    "get_default_settings",
]
