"""Utility functions for assetsmith.

This module provides utility functions including:

- Logging setup and configuration
- Batch outcome tracking and statistics
"""

from assetsmith.utils.logging import (
    BatchLogger,
    BatchStats,
    configure_logging,
    get_logger,
)

__all__ = [
    "BatchLogger",
    "BatchStats",
    "configure_logging",
    "get_logger",
]
