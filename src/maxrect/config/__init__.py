"""Configuration management for maxrect.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments, named presets or defaults.

Key classes:
- SearchConfig: Angle sweep and binary search settings
- CentroidConfig: Candidate center generation settings
- ValidationConfig: Sampling density and repair settings
- HybridConfig: Strategy selection settings
- LoggingConfig: Logging settings
- MaxRectSettings: Main application settings
"""

from maxrect.config.settings import (
    PRESETS,
    CentroidConfig,
    CentroidStrategy,
    HybridConfig,
    LoggingConfig,
    MaxRectSettings,
    SearchConfig,
    ValidationConfig,
    get_default_settings,
    get_preset,
)

__all__ = [
    "PRESETS",
    "CentroidConfig",
    "CentroidStrategy",
    "HybridConfig",
    "LoggingConfig",
    "MaxRectSettings",
    "SearchConfig",
    "ValidationConfig",
    "get_default_settings",
    "get_preset",
]
