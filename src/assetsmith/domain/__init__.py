"""Domain models for assetsmith.

This module contains the models representing the asset registry and the
results of highlight batch runs. They are independent of Pillow and of the
textual registry formats.

Key classes:
- AssetEntry: One tracked image (id, dimensions, highlight reference)
- Registry: Ordered, key-unique collection of entries
- Created / Skipped / Failed: Per-file highlight outcomes
"""

from assetsmith.domain.outcome import Created, Failed, HighlightOutcome, Skipped, SkipReason
from assetsmith.domain.registry import (
    HIGHLIGHT_SUFFIX,
    KEY_SEPARATOR,
    AssetEntry,
    Registry,
    highlight_key_for,
    is_highlight_key,
)

__all__: list[str] = [
    # Constants
    "HIGHLIGHT_SUFFIX",
    "KEY_SEPARATOR",
    # Registry
    "AssetEntry",
    "Registry",
    "highlight_key_for",
    "is_highlight_key",
    # Outcomes
    "Created",
    "Failed",
    "HighlightOutcome",
    "SkipReason",
    "Skipped",
]
