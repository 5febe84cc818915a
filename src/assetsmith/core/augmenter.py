"""Registry augmentation.

Refreshes every registry entry from the images on disk:

- Dimensions are always re-measured; stored values are only kept when the
  image is missing or unreadable.
- With ``auto_highlight``, missing highlight variants are generated.
- ``highlight_id`` is set to the id of the entry registered for the
  highlight variant when that file exists, and cleared otherwise.

Entries are never added or removed; the upstream sync tool owns the set
of assets.
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from assetsmith.config import HighlightConfig
from assetsmith.core.scanner import HighlightProcessor, highlight_path_for
from assetsmith.domain import AssetEntry, Registry, highlight_key_for, is_highlight_key
from assetsmith.exceptions import AssetIOError, AssetsmithError, DecodeError, MissingSourceFileError
from assetsmith.io.codec import ImageCodec
from assetsmith.io.probe import DimensionProbe
from assetsmith.utils import BatchLogger, BatchStats, get_logger


@dataclass
class AugmentResult:
    """Outcome of augmenting a registry.

    Attributes:
        registry: The augmented registry (same object that was passed in)
        warnings: Non-fatal problems, e.g. MissingSourceFileError
        highlight_stats: Tally of highlight generation (auto_highlight only)
        pending_highlights: Keys whose highlight file exists but is not
            registered yet, so it has no id to link
    """

    registry: Registry
    warnings: list[AssetsmithError] = field(default_factory=list)
    highlight_stats: BatchStats = field(default_factory=BatchStats)
    pending_highlights: list[str] = field(default_factory=list)

    @property
    def missing(self) -> list[MissingSourceFileError]:
        return [w for w in self.warnings if isinstance(w, MissingSourceFileError)]

    @property
    def failed_count(self) -> int:
        """Failures count against the run; warnings do not."""
        return self.highlight_stats.failed_count


class Augmenter:
    """Merges measured dimensions and highlight links into a registry.

    Example:
        augmenter = Augmenter(HighlightConfig(auto_highlight=True))
        result = augmenter.augment(registry, Path("assets/images"))
        for warning in result.warnings:
            print(warning)
    """

    def __init__(
        self,
        config: HighlightConfig | None = None,
        probe: DimensionProbe | None = None,
        codec: ImageCodec | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.config = config if config is not None else HighlightConfig()
        self.probe = probe if probe is not None else DimensionProbe()
        self.logger = logger if logger is not None else get_logger()
        self.processor = HighlightProcessor(self.config, codec=codec, logger=self.logger)

    def augment(self, registry: Registry, images_root: Path) -> AugmentResult:
        """Augment ``registry`` in place.

        Args:
            registry: Registry to update
            images_root: Folder that registry keys are relative to

        Returns:
            AugmentResult with the registry, warnings and highlight tally
        """
        result = AugmentResult(registry=registry)
        batch_logger = BatchLogger(self.logger)
        batch_logger.start()

        self.logger.info(
            "Augmenting registry",
            entries=len(registry),
            images_root=str(images_root),
            auto_highlight=self.config.auto_highlight,
        )

        for entry in registry:
            image_path = images_root.joinpath(*entry.segments)

            if image_path.is_file():
                self._measure(entry, image_path, result)
                if self.config.auto_highlight and not is_highlight_key(entry.key):
                    batch_logger.log_outcome(self.processor.process_file(image_path))
            else:
                warning = MissingSourceFileError(entry.key, image_path)
                self.logger.warning(
                    "Source image missing, keeping previous dimensions",
                    key=entry.key,
                    path=str(image_path),
                )
                result.warnings.append(warning)

            self._link_highlight(registry, entry, image_path, result)

        if self.config.auto_highlight:
            batch_logger.finish()
        result.highlight_stats = batch_logger.stats

        self.logger.info(
            "Registry augmented",
            entries=len(registry),
            warnings=len(result.warnings),
            highlights_created=result.highlight_stats.created_count,
            highlights_failed=result.highlight_stats.failed_count,
        )
        return result

    def _measure(self, entry: AssetEntry, image_path: Path, result: AugmentResult) -> None:
        try:
            width, height = self.probe.probe(image_path)
        except (DecodeError, AssetIOError) as e:
            self.logger.warning(
                "Could not read image size, keeping previous dimensions",
                key=entry.key,
                error=str(e),
            )
            result.warnings.append(e)
            return
        entry.set_dimensions(width, height)

    def _link_highlight(
        self,
        registry: Registry,
        entry: AssetEntry,
        image_path: Path,
        result: AugmentResult,
    ) -> None:
        if is_highlight_key(entry.key):
            entry.highlight_id = None
            return

        highlight_exists = highlight_path_for(image_path).is_file()
        sibling = registry.highlight_for(entry)

        if highlight_exists and sibling is not None:
            entry.highlight_id = sibling.asset_id
            return

        if highlight_exists:
            self.logger.warning(
                "Highlight exists but is not registered yet",
                key=entry.key,
                highlight_key=highlight_key_for(entry.key),
            )
            result.pending_highlights.append(entry.key)
        entry.highlight_id = None
