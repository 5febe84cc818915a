"""Shared fixtures: small PNG files written with Pillow."""

from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

Box = tuple[int, int, int, int]

SPRITE_COLOR = (200, 40, 40, 255)


def square_pixels(size: int = 10, box: Box | None = (2, 2, 8, 8)) -> np.ndarray:
    """RGBA array of a transparent canvas with an opaque box.

    ``box`` is (left, top, right, bottom), right/bottom exclusive.
    """
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    if box is not None:
        left, top, right, bottom = box
        pixels[top:bottom, left:right] = SPRITE_COLOR
    return pixels


@pytest.fixture
def sprite_pixels() -> Callable[..., np.ndarray]:
    """Factory for in-memory RGBA sprites, see ``square_pixels``."""
    return square_pixels


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an RGBA sprite below ``tmp_path``.

    Usage: ``make_png("ui/play.png", size=10, box=(2, 2, 8, 8))``
    """

    def _make(relative: str, size: int = 10, box: Box | None = (2, 2, 8, 8)) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(square_pixels(size, box)).save(path, format="PNG")
        return path

    return _make


@pytest.fixture
def make_rgb_png(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a PNG without an alpha channel."""

    def _make(relative: str, size: tuple[int, int] = (8, 8)) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, (10, 20, 30)).save(path, format="PNG")
        return path

    return _make


@pytest.fixture
def images_root(tmp_path: Path) -> Path:
    """Empty images folder."""
    root = tmp_path / "images"
    root.mkdir()
    return root
