"""Highlight synthesis.

A highlight variant is the source image with a solid band of
``outline_color`` around its opaque silhouette:

1. Threshold the alpha channel into a solid mask.
2. Dilate the mask ``thickness`` times with 8-neighbour growth.
3. Ring = dilated mask minus the solid mask.
4. Keep solid pixels, paint ring pixels, clear everything else.

The canvas is never resized; outlines touching the border are clipped.
"""

from pathlib import Path

import numpy as np

from assetsmith.config import WHITE
from assetsmith.core.mask import build_pixel_mask, ring_mask
from assetsmith.exceptions import AssetIOError, DecodeError, EmptyImageError
from assetsmith.io.codec import ImageCodec, PillowCodec


def synthesize_highlight(
    pixels: np.ndarray,
    thickness: int = 1,
    outline_color: tuple[int, ...] = WHITE,
    source: str | Path = "<image>",
) -> np.ndarray:
    """Build the highlight variant of an RGBA image.

    Args:
        pixels: ``(h, w, 4)`` uint8 RGBA array
        thickness: Outline thickness in pixels, at least 1
        outline_color: RGB (or RGBA, alpha ignored) outline color
        source: Name used in error messages

    Returns:
        New ``(h, w, 4)`` uint8 array

    Raises:
        ValueError: If thickness is below 1
        DecodeError: If the array has no alpha channel
        EmptyImageError: If no pixel is opaque
    """
    if thickness < 1:
        raise ValueError(f"Outline thickness must be >= 1, got {thickness}")
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise DecodeError(source, f"expected RGBA pixels, got array of shape {pixels.shape}")

    solid = build_pixel_mask(pixels)
    if not solid.any():
        raise EmptyImageError(source)

    ring = ring_mask(solid, thickness)
    r, g, b = outline_color[:3]

    output = np.zeros_like(pixels, dtype=np.uint8)
    output[solid] = pixels[solid]
    output[ring] = (r, g, b, 255)
    return output


def generate_highlight(
    source_path: Path,
    output_path: Path,
    thickness: int = 1,
    outline_color: tuple[int, ...] = WHITE,
    codec: ImageCodec | None = None,
) -> Path:
    """Read an image, synthesize its highlight and write it.

    Nothing is written if synthesis fails.

    Raises:
        AssetIOError: If the source cannot be read or the output written
        DecodeError: If the source is not a PNG with alpha
        EmptyImageError: If the source is fully transparent
    """
    codec = codec if codec is not None else PillowCodec()

    try:
        data = source_path.read_bytes()
    except OSError as e:
        raise AssetIOError(source_path, e.strerror or str(e)) from e

    pixels = codec.decode(data, source=source_path)
    highlight = synthesize_highlight(pixels, thickness, outline_color, source=source_path)
    encoded = codec.encode(highlight)

    try:
        output_path.write_bytes(encoded)
    except OSError as e:
        raise AssetIOError(output_path, e.strerror or str(e)) from e
    return output_path
