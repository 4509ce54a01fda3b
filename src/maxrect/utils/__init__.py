"""Utility functions for maxrect.

This module provides utility functions including:

- Logging setup and configuration
- A structlog-backed trace observer with search statistics
"""

from maxrect.utils.logging import (
    SearchLogger,
    SearchStats,
    configure_logging,
)

__all__ = [
    "SearchLogger",
    "SearchStats",
    "configure_logging",
]
