"""Binary mask operations for outline synthesis.

Masks are 2D boolean numpy arrays with the same height and width as the
image they were derived from. Dilation runs on Pillow's rank filters.
"""

import numpy as np
from PIL import Image, ImageFilter

# Any alpha above this counts as solid
OPACITY_THRESHOLD = 0


def build_pixel_mask(pixels: np.ndarray, threshold: int = OPACITY_THRESHOLD) -> np.ndarray:
    """Return the opacity mask of an ``(h, w, 4)`` RGBA array."""
    return pixels[:, :, 3] > threshold


def dilate(mask: np.ndarray, rounds: int) -> np.ndarray:
    """Grow a mask by ``rounds`` steps of 8-neighbour dilation.

    Each round is a 3x3 max filter, so a pixel is set if it or any of its
    eight neighbours was set after the previous round. The canvas is never
    enlarged; growth that reaches the border is clipped there.

    Args:
        mask: 2D boolean array
        rounds: Number of dilation steps (0 returns a copy)

    Returns:
        Dilated mask of the same shape
    """
    if rounds < 0:
        raise ValueError(f"rounds must be >= 0, got {rounds}")

    if rounds == 0:
        return mask.astype(bool, copy=True)

    image = Image.fromarray(np.where(mask, 255, 0).astype(np.uint8))
    for _ in range(rounds):
        image = image.filter(ImageFilter.MaxFilter(3))
    return np.asarray(image) > 0


def ring_mask(mask: np.ndarray, thickness: int) -> np.ndarray:
    """Pixels within ``thickness`` (Chebyshev) of the mask but not in it."""
    return dilate(mask, thickness) & ~mask
