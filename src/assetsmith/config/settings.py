"""Configuration settings for Assetsmith."""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

Channel = Annotated[int, Field(ge=0, le=255)]

WHITE: tuple[int, int, int] = (255, 255, 255)


class HighlightConfig(BaseModel):
    """Configuration for highlight synthesis.

    These are the only values the outline engine and the augmenter read.
    """

    thickness: int = Field(
        default=1,
        ge=1,
        description="Outline thickness in pixels (Chebyshev distance)",
    )
    outline_color: tuple[Channel, Channel, Channel] = Field(
        default=WHITE,
        description="RGB color of the outline; always written fully opaque",
    )
    force: bool = Field(
        default=False,
        description="Overwrite existing highlight variants",
    )
    auto_highlight: bool = Field(
        default=False,
        description="Generate missing highlights while syncing the registry",
    )

    @field_validator("outline_color", mode="before")
    @classmethod
    def parse_hex_color(cls, value: object) -> object:
        """Accept ``RRGGBB`` / ``#RRGGBB`` strings as well as RGB tuples."""
        if isinstance(value, str):
            text = value.lstrip("#")
            if len(text) != 6:
                raise ValueError(f"expected RRGGBB, got {value!r}")
            try:
                return tuple(int(text[i : i + 2], 16) for i in (0, 2, 4))
            except ValueError as e:
                raise ValueError(f"expected RRGGBB, got {value!r}") from e
        return value


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max worker processes (None = auto, 1 = serial)",
    )


class SyncConfig(BaseModel):
    """Locations used by the ``sync`` command."""

    assets_input: Path = Field(
        default=Path("src/shared/data/assets/assets.luau"),
        description="Registry to read (.luau or .json)",
    )
    assets_output: Path = Field(
        default=Path("src/shared/data/assets/assets.luau"),
        description="Runtime module to write",
    )
    dts_output: Path = Field(
        default=Path("src/shared/data/assets/assets.d.ts"),
        description="Type declaration module to write",
    )
    images_folder: Path = Field(
        default=Path("assets/images"),
        description="Root folder that registry keys are relative to",
    )
    upstream_command: list[str] | None = Field(
        default=None,
        description="Command that uploads images and refreshes the registry (None = skip)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class AssetsmithSettings(BaseModel):
    """Main application settings."""

    highlight: HighlightConfig = Field(default_factory=HighlightConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> AssetsmithSettings:
    """Get default application settings."""
    return AssetsmithSettings()
