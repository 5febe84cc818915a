"""Per-file results of a highlight batch run.

Every candidate image produces exactly one outcome:
- Created: a highlight variant was written
- Skipped: nothing was written (highlight exists, or dry run)
- Failed: synthesis or writing failed; the batch carries on
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SkipReason(str, Enum):
    """Why a candidate was skipped."""

    EXISTS = "exists"
    DRY_RUN = "dry-run"


@dataclass(frozen=True, slots=True)
class Created:
    """A highlight variant was written.

    Attributes:
        path: Source image
        highlight_path: Written highlight variant
    """

    path: Path
    highlight_path: Path


@dataclass(frozen=True, slots=True)
class Skipped:
    """No work was done for the source image.

    Attributes:
        path: Source image
        reason: Why it was skipped
    """

    path: Path
    reason: SkipReason


@dataclass(frozen=True, slots=True)
class Failed:
    """Synthesis or writing failed for the source image.

    Attributes:
        path: Source image
        cause: Human-readable error message
        error_type: Exception class name (e.g. "DecodeError")
    """

    path: Path
    cause: str
    error_type: str = "AssetsmithError"


HighlightOutcome = Created | Skipped | Failed
