"""Logging utilities for Assetsmith."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from assetsmith.domain import Created, Failed, HighlightOutcome, Skipped

LOGGER_NAME = "assetsmith"

_installed_handlers: list[logging.Handler] = []


@dataclass
class BatchStats:
    """Statistics from a highlight batch run."""

    created_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def total(self) -> int:
        return self.created_count + self.skipped_count + self.failed_count

    @property
    def succeeded(self) -> bool:
        """A run with any failure is incomplete."""
        return self.failed_count == 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    def record(self, outcome: HighlightOutcome) -> None:
        """Count one outcome."""
        if isinstance(outcome, Created):
            self.created_count += 1
        elif isinstance(outcome, Skipped):
            self.skipped_count += 1
        else:
            self.failed_count += 1
            self.failures.append((str(outcome.path), outcome.cause))


def get_logger() -> structlog.stdlib.BoundLogger:
    """Return the package logger."""
    return structlog.get_logger(LOGGER_NAME)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Reconfiguring replaces the handlers installed by a previous call
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = get_logger()
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class BatchLogger:
    """Logger for tracking highlight outcomes and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else get_logger()
        self._stats = BatchStats()

    def start(self) -> None:
        self._stats.start_time = time.time()

    def finish(self) -> None:
        self._stats.end_time = time.time()
        self._logger.info(
            "Highlight batch complete",
            created=self._stats.created_count,
            skipped=self._stats.skipped_count,
            failed=self._stats.failed_count,
            duration_seconds=round(self._stats.duration_seconds, 2),
        )

    def log_outcome(self, outcome: HighlightOutcome) -> None:
        """Log a single outcome and count it."""
        if isinstance(outcome, Created):
            self._logger.info(
                "Highlight created",
                image=str(outcome.path),
                highlight=str(outcome.highlight_path),
            )
        elif isinstance(outcome, Skipped):
            self._logger.debug("Highlight skipped", image=str(outcome.path), reason=outcome.reason.value)
        elif isinstance(outcome, Failed):
            self._logger.error(
                "Highlight failed",
                image=str(outcome.path),
                error=outcome.cause,
                error_type=outcome.error_type,
            )
        self._stats.record(outcome)

    @property
    def stats(self) -> BatchStats:
        """Get current batch statistics."""
        return self._stats
