"""Batch highlight generation.

This module discovers candidate images and drives highlight synthesis
for each of them, optionally in a pool of worker processes.

Key components:
- scan: Lazily enumerate candidate images under a file or directory
- render_highlight: Top-level picklable function for parallel execution
- process_batch: Yield one HighlightOutcome per candidate
- HighlightProcessor: Runs a batch and aggregates statistics
"""

import os
import traceback
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, as_completed, wait
from pathlib import Path
from typing import Any

import structlog

from assetsmith.config import WHITE, HighlightConfig, ProcessingConfig
from assetsmith.core.outline import generate_highlight
from assetsmith.domain import HIGHLIGHT_SUFFIX, Created, Failed, HighlightOutcome, Skipped, SkipReason
from assetsmith.exceptions import AssetIOError
from assetsmith.io.codec import ImageCodec, PillowCodec
from assetsmith.utils import BatchLogger, BatchStats, get_logger

IMAGE_EXTENSIONS = frozenset({".png"})


def highlight_path_for(image_path: Path) -> Path:
    """Return the sibling highlight path: ``name.png`` -> ``name-highlight.png``."""
    return image_path.with_name(f"{image_path.stem}{HIGHLIGHT_SUFFIX}.png")


def is_highlight_path(path: Path) -> bool:
    """Check whether a file is itself a highlight variant."""
    return path.stem.endswith(HIGHLIGHT_SUFFIX)


def scan(root: Path) -> Iterator[Path]:
    """Enumerate candidate images.

    A file root yields exactly that file, even if it is a highlight
    variant. A directory root yields every image below it (sorted, so
    runs are reproducible) except existing highlight variants. Scanning
    has no side effects and can be repeated.

    Raises:
        AssetIOError: If ``root`` does not exist
    """
    if root.is_file():
        return iter([root])
    if not root.is_dir():
        raise AssetIOError(root, "no such file or directory")
    return _walk(root)


def _walk(root: Path) -> Iterator[Path]:
    for path in sorted(root.rglob("*")):
        if path.suffix.lower() in IMAGE_EXTENSIONS and path.is_file() and not is_highlight_path(path):
            yield path


def render_highlight(
    source: str,
    target: str,
    thickness: int,
    outline_color: tuple[int, ...],
    codec: ImageCodec,
) -> dict[str, Any]:
    """Synthesize and write one highlight.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Returns:
        Dictionary containing either:
        - Success: {"highlight": str}
        - Error: {"error": str, "error_type": str, "traceback": str}
    """
    try:
        generate_highlight(Path(source), Path(target), thickness, outline_color, codec)
        return {"highlight": target}
    except Exception as e:
        return {
            "error": str(e),
            "error_type": type(e).__name__,
            "traceback": traceback.format_exc(),
        }


def _precheck(path: Path, force: bool, dry_run: bool) -> Skipped | None:
    # Existence checks only; dry runs never pay for decoding
    if highlight_path_for(path).exists() and not force:
        return Skipped(path, SkipReason.EXISTS)
    if dry_run:
        return Skipped(path, SkipReason.DRY_RUN)
    return None


def _to_outcome(path: Path, result: dict[str, Any]) -> HighlightOutcome:
    if "error" in result:
        return Failed(path, result["error"], result.get("error_type", "Exception"))
    return Created(path, Path(result["highlight"]))


def _collect(path: Path, future: Future) -> HighlightOutcome:
    try:
        return _to_outcome(path, future.result())
    except Exception as e:
        # Executor-level error, e.g. a worker process died
        return Failed(path, str(e), type(e).__name__)


def process_batch(
    paths: Iterable[Path],
    thickness: int = 1,
    force: bool = False,
    dry_run: bool = False,
    *,
    outline_color: tuple[int, ...] = WHITE,
    max_workers: int | None = 1,
    codec: ImageCodec | None = None,
) -> Iterator[HighlightOutcome]:
    """Yield one outcome per candidate path.

    Skips are decided up front from existence checks. With more than one
    worker, synthesis runs in a process pool with a bounded number of
    submissions in flight, and outcomes arrive in completion order. A
    caller can stop iterating at any time; work already submitted is
    allowed to finish.

    Args:
        paths: Candidate images
        thickness: Outline thickness in pixels, at least 1
        force: Regenerate highlights that already exist
        dry_run: Report what would be generated without writing anything
        outline_color: RGB outline color
        max_workers: Worker processes (1 = serial in this process, None = auto)
        codec: Image codec (default: Pillow)
    """
    if thickness < 1:
        raise ValueError(f"Outline thickness must be >= 1, got {thickness}")

    codec = codec if codec is not None else PillowCodec()
    color = tuple(outline_color[:3])

    if max_workers == 1:
        for path in paths:
            skipped = _precheck(path, force, dry_run)
            if skipped is not None:
                yield skipped
                continue
            target = highlight_path_for(path)
            yield _to_outcome(path, render_highlight(str(path), str(target), thickness, color, codec))
        return

    window = 2 * (max_workers or os.cpu_count() or 1)
    in_flight: dict[Future, Path] = {}

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        for path in paths:
            skipped = _precheck(path, force, dry_run)
            if skipped is not None:
                yield skipped
                continue

            while len(in_flight) >= window:
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    yield _collect(in_flight.pop(future), future)

            target = highlight_path_for(path)
            future = executor.submit(render_highlight, str(path), str(target), thickness, color, codec)
            in_flight[future] = path

        for future in as_completed(list(in_flight)):
            yield _collect(in_flight.pop(future), future)


class HighlightProcessor:
    """Runs highlight batches and aggregates their outcomes.

    Outcomes are counted in one place, the loop in ``run``, no matter how
    many workers produced them.

    Example:
        processor = HighlightProcessor(HighlightConfig(thickness=2))
        stats = processor.run(scan(Path("assets/images")))
        print(stats.created_count, stats.failed_count)
    """

    def __init__(
        self,
        config: HighlightConfig | None = None,
        processing: ProcessingConfig | None = None,
        codec: ImageCodec | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.config = config if config is not None else HighlightConfig()
        self.processing = processing if processing is not None else ProcessingConfig()
        self.codec = codec if codec is not None else PillowCodec()
        self.logger = logger if logger is not None else get_logger()

    def iter_outcomes(
        self,
        paths: Iterable[Path],
        dry_run: bool = False,
        max_workers: int | None = None,
    ) -> Iterator[HighlightOutcome]:
        """Yield outcomes with this processor's settings."""
        if max_workers is None:
            max_workers = self.processing.max_workers
        return process_batch(
            paths,
            thickness=self.config.thickness,
            force=self.config.force,
            dry_run=dry_run,
            outline_color=self.config.outline_color,
            max_workers=max_workers,
            codec=self.codec,
        )

    def run(
        self,
        paths: Iterable[Path],
        dry_run: bool = False,
        max_workers: int | None = None,
        progress_callback: Callable[[int, HighlightOutcome], None] | None = None,
    ) -> BatchStats:
        """Process every path and return the tally.

        Args:
            paths: Candidate images, e.g. from ``scan``
            dry_run: Report what would be generated without writing anything
            max_workers: Override the configured worker count
            progress_callback: Optional callback(completed, outcome)

        Returns:
            BatchStats with created/skipped/failed counts
        """
        batch_logger = BatchLogger(self.logger)
        batch_logger.start()
        self.logger.info(
            "Starting highlight batch",
            thickness=self.config.thickness,
            force=self.config.force,
            dry_run=dry_run,
        )

        completed = 0
        for outcome in self.iter_outcomes(paths, dry_run=dry_run, max_workers=max_workers):
            batch_logger.log_outcome(outcome)
            completed += 1
            if progress_callback is not None:
                progress_callback(completed, outcome)

        batch_logger.finish()
        return batch_logger.stats

    def process_file(self, path: Path) -> HighlightOutcome:
        """Process a single image in this process."""
        return next(self.iter_outcomes([path], max_workers=1))
