"""Image codec adapters.

The outline engine works on RGBA pixel arrays and never touches files or
a specific imaging library directly. A codec turns PNG bytes into an
``(height, width, 4)`` ``uint8`` array and back.
"""

import io
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image, UnidentifiedImageError

from assetsmith.exceptions import DecodeError

# Modes that carry a real alpha channel
ALPHA_MODES = frozenset({"RGBA", "RGBa", "LA", "La", "PA"})


class ImageCodec(Protocol):
    """Decode and encode RGBA pixel arrays."""

    def decode(self, data: bytes, source: str | Path = "<bytes>") -> np.ndarray:
        """Decode PNG bytes into an ``(h, w, 4)`` uint8 array.

        Raises:
            DecodeError: If the data is not a readable PNG with alpha
        """
        ...

    def encode(self, pixels: np.ndarray) -> bytes:
        """Encode an ``(h, w, 4)`` uint8 array as PNG bytes."""
        ...


def has_alpha_channel(image: Image.Image) -> bool:
    """Check whether a Pillow image carries transparency information."""
    return image.mode in ALPHA_MODES or "transparency" in image.info


class PillowCodec:
    """In-process PNG codec backed by Pillow."""

    def decode(self, data: bytes, source: str | Path = "<bytes>") -> np.ndarray:
        try:
            with Image.open(io.BytesIO(data)) as image:
                if image.format != "PNG":
                    raise DecodeError(source, f"not a PNG image (format: {image.format})")
                if not has_alpha_channel(image):
                    raise DecodeError(source, f"image has no alpha channel (mode: {image.mode})")
                rgba = image.convert("RGBA")
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise DecodeError(source, str(e)) from e

        return np.asarray(rgba, dtype=np.uint8).copy()

    def encode(self, pixels: np.ndarray) -> bytes:
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"expected an (h, w, 4) array, got shape {pixels.shape}")
        buffer = io.BytesIO()
        Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(buffer, format="PNG")
        return buffer.getvalue()
