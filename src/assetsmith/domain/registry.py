"""Asset registry representation.

A registry is an ordered mapping from a path-like key
(``ui/buttons/play.png``) to the entry describing that image. The textual
formats nest entries per path segment; in memory the keys are flat and
``/``-joined, which keeps augmentation independent of the nesting.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import PurePosixPath

from assetsmith.exceptions import DuplicateKeyError

KEY_SEPARATOR = "/"
HIGHLIGHT_SUFFIX = "-highlight"


def highlight_key_for(key: str) -> str:
    """Return the registry key of the highlight variant of ``key``.

    ``ui/play.png`` -> ``ui/play-highlight.png``
    """
    path = PurePosixPath(key)
    return str(path.with_name(f"{path.stem}{HIGHLIGHT_SUFFIX}.png"))


def is_highlight_key(key: str) -> bool:
    """Check whether ``key`` names a highlight variant itself."""
    return PurePosixPath(key).stem.endswith(HIGHLIGHT_SUFFIX)


@dataclass
class AssetEntry:
    """A single tracked image.

    Attributes:
        key: Path-like identifier, unique within a registry
        asset_id: Opaque identifier assigned by the upstream sync tool
        width: Image width in pixels (None if never measured)
        height: Image height in pixels (None if never measured)
        highlight_id: Asset id of the sibling highlight variant, if any
    """

    key: str
    asset_id: str
    width: int | None = None
    height: int | None = None
    highlight_id: str | None = None

    def __post_init__(self) -> None:
        self._check_dimensions(self.width, self.height)

    @staticmethod
    def _check_dimensions(width: int | None, height: int | None) -> None:
        if (width is None) != (height is None):
            raise ValueError("width and height must both be set or both be absent")
        if width is not None and height is not None and (width <= 0 or height <= 0):
            raise ValueError(f"dimensions must be positive, got {width}x{height}")

    @property
    def has_dimensions(self) -> bool:
        return self.width is not None

    @property
    def segments(self) -> list[str]:
        """Key split into its nesting segments."""
        return self.key.split(KEY_SEPARATOR)

    def set_dimensions(self, width: int, height: int) -> None:
        """Set both dimensions at once, keeping them consistent."""
        self._check_dimensions(width, height)
        self.width = width
        self.height = height


class Registry:
    """Ordered, key-unique collection of asset entries.

    Iteration yields entries in insertion order, so a parse/augment/emit
    round trip keeps untouched entries where they were.

    Example:
        registry = Registry()
        registry.add(AssetEntry("ui/play.png", "rbxassetid://1"))
        for entry in registry:
            print(entry.key)
    """

    def __init__(self, entries: list[AssetEntry] | None = None) -> None:
        self._entries: dict[str, AssetEntry] = {}
        for entry in entries or []:
            self.add(entry)

    def add(self, entry: AssetEntry) -> None:
        """Append an entry.

        Raises:
            DuplicateKeyError: If the key is already present
        """
        if entry.key in self._entries:
            raise DuplicateKeyError(entry.key)
        self._entries[entry.key] = entry

    def get(self, key: str) -> AssetEntry | None:
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __getitem__(self, key: str) -> AssetEntry:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[AssetEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    def __repr__(self) -> str:
        return f"Registry({len(self)} entries)"

    def highlight_for(self, entry: AssetEntry) -> AssetEntry | None:
        """Look up the registry entry of ``entry``'s highlight variant."""
        if is_highlight_key(entry.key):
            return None
        return self._entries.get(highlight_key_for(entry.key))
