"""Core processing algorithms for assetsmith.

This module contains the core algorithms for:

- Mask operations (opacity threshold, 8-neighbour dilation, ring mask)
- Highlight synthesis (outline band composited around the silhouette)
- Batch scanning and processing with partial-failure semantics
- Registry augmentation (dimensions and highlight links)

Key functions:
- build_pixel_mask: Threshold an RGBA array's alpha channel
- dilate: Grow a mask by N rounds of 8-neighbour dilation
- ring_mask: Pixels added by dilation
- synthesize_highlight: RGBA array -> highlight RGBA array
- generate_highlight: Source file -> highlight file
- scan: Enumerate candidate images
- process_batch: Yield one HighlightOutcome per candidate

Key classes:
- HighlightProcessor: Runs batches and aggregates statistics
- Augmenter: Merges measurements and highlight links into a registry
"""

from assetsmith.core.augmenter import Augmenter, AugmentResult
from assetsmith.core.mask import OPACITY_THRESHOLD, build_pixel_mask, dilate, ring_mask
from assetsmith.core.outline import generate_highlight, synthesize_highlight
from assetsmith.core.scanner import (
    IMAGE_EXTENSIONS,
    HighlightProcessor,
    highlight_path_for,
    is_highlight_path,
    process_batch,
    render_highlight,
    scan,
)

__all__ = [
    "IMAGE_EXTENSIONS",
    "OPACITY_THRESHOLD",
    # Augmenter classes
    "AugmentResult",
    "Augmenter",
    # Processor classes
    "HighlightProcessor",
    # Mask functions
    "build_pixel_mask",
    "dilate",
    "ring_mask",
    # Outline functions
    "generate_highlight",
    "synthesize_highlight",
    # Scanner functions
    "highlight_path_for",
    "is_highlight_path",
    "process_batch",
    "render_highlight",
    "scan",
]
