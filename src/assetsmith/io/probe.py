"""Image dimension probing.

Pillow opens images lazily: ``Image.open`` parses the header and stops,
so reading ``size`` never decodes pixel data.
"""

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from assetsmith.exceptions import AssetIOError, DecodeError


class DimensionProbe:
    """Reads image width and height from file headers.

    Stateless and read-only; safe to share between threads.

    Example:
        width, height = DimensionProbe().probe(Path("ui/play.png"))
    """

    def probe(self, image_path: Path) -> tuple[int, int]:
        """Return ``(width, height)`` of an image.

        Args:
            image_path: Path to the image file

        Returns:
            Tuple of (width, height) in pixels

        Raises:
            AssetIOError: If the file cannot be opened
            DecodeError: If the file is not a supported, readable image
        """
        try:
            with Image.open(image_path) as image:
                width, height = image.size
        except FileNotFoundError as e:
            raise AssetIOError(image_path, "file not found") from e
        except UnidentifiedImageError as e:
            raise DecodeError(image_path, "unsupported or corrupt image") from e
        except (SyntaxError, ValueError) as e:
            raise DecodeError(image_path, str(e)) from e
        except OSError as e:
            raise AssetIOError(image_path, str(e)) from e

        if width <= 0 or height <= 0:
            raise DecodeError(image_path, f"invalid dimensions {width}x{height}")
        return width, height
