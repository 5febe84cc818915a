"""Exception hierarchy for Assetsmith."""

from pathlib import Path


class AssetsmithError(Exception):
    """Base exception for all Assetsmith errors."""

    pass


class ImageError(AssetsmithError):
    """Errors related to reading or outlining images."""

    pass


class DecodeError(ImageError):
    """Image is unreadable, corrupt, not a PNG or has no alpha channel."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to decode image '{self.path}': {reason}")


class EmptyImageError(ImageError):
    """Image is fully transparent, so there is nothing to outline."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Image '{self.path}' is fully transparent, nothing to outline")


class RegistryError(AssetsmithError):
    """Errors related to loading an asset registry."""

    pass


class MalformedRegistryError(RegistryError):
    """Registry text could not be parsed."""

    def __init__(self, source: str, reason: str, line: int | None = None) -> None:
        self.source = source
        self.reason = reason
        self.line = line
        location = f"{source}:{line}" if line is not None else source
        super().__init__(f"Malformed registry '{location}': {reason}")


class DuplicateKeyError(RegistryError):
    """The same asset key appears twice in a registry."""

    def __init__(self, key: str, source: str | None = None) -> None:
        self.key = key
        self.source = source
        where = f" in '{source}'" if source else ""
        super().__init__(f"Duplicate asset key '{key}'{where}")


class AssetIOError(AssetsmithError):
    """Filesystem access failed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"I/O error on '{self.path}': {reason}")


class MissingSourceFileError(AssetsmithError):
    """Registry entry has no backing image.

    Recorded as a warning during augmentation, never raised out of it.
    """

    def __init__(self, key: str, path: str | Path) -> None:
        self.key = key
        self.path = str(path)
        super().__init__(f"No source image for '{key}' (expected at '{self.path}')")


class UpstreamSyncError(AssetsmithError):
    """The upstream asset sync tool failed."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Upstream sync '{command}' failed: {reason}")
