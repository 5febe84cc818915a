"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with per-file outcome lines and formatted summaries.
"""

from pathlib import Path

from rich.console import Console
from rich.text import Text

from assetsmith.domain import Created, Failed, HighlightOutcome, Skipped, SkipReason
from assetsmith.utils import BatchStats

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_WARN = "!"  # Warning
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Assetsmith[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_outcome(outcome: HighlightOutcome) -> None:
    """Print one line for a per-file highlight outcome."""
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    if isinstance(outcome, Created):
        line.append(f"{SYM_OK} ", style="green")
        line.append(str(outcome.highlight_path))
    elif isinstance(outcome, Skipped):
        line.append(f"{SYM_DOT} ", style="dim")
        line.append(str(outcome.path))
        if outcome.reason is SkipReason.EXISTS:
            line.append(" (highlight already exists)", style="dim")
        else:
            line.append(" (dry run: would generate)", style="dim")
    elif isinstance(outcome, Failed):
        line.append(f"{SYM_ERR} ", style="red")
        line.append(str(outcome.path))
        line.append(f" {outcome.cause}", style="red")
    console.print(line)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def format_tally(stats: BatchStats) -> str:
    """Render the created/skipped/failed tally with rich markup."""
    failed_style = "red" if stats.failed_count > 0 else "green"
    return (
        f"{stats.created_count} created {SYM_DOT} {stats.skipped_count} skipped {SYM_DOT} "
        f"[{failed_style}]{stats.failed_count} failed[/{failed_style}]"
    )


def print_batch_summary(stats: BatchStats, dry_run: bool = False) -> None:
    """Print the final tally of a highlight batch.

    Args:
        stats: Batch statistics
        dry_run: Whether nothing was written
    """
    time_str = _format_time(stats.duration_seconds)

    if not stats.succeeded:
        console.print(f"\n[bold red]{SYM_ERR} Incomplete[/bold red] in {time_str}")
    elif dry_run:
        console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] – no changes made")
    else:
        console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    console.print(f"  {format_tally(stats)}")


def print_sync_summary(
    entries: int,
    written: list[Path],
    warnings: int,
    highlight_stats: BatchStats | None = None,
) -> None:
    """Print the result of a registry sync.

    Args:
        entries: Number of registry entries
        written: Output files that changed
        warnings: Number of non-fatal warnings
        highlight_stats: Tally of generated highlights, if enabled
    """
    failed = highlight_stats is not None and not highlight_stats.succeeded
    if failed:
        console.print(f"\n[bold red]{SYM_ERR} Incomplete[/bold red]")
    else:
        console.print(f"\n[bold green]{SYM_OK} Complete[/bold green]")

    warning_style = "yellow" if warnings > 0 else "green"
    console.print(
        f"  {entries} entries {SYM_DOT} {len(written)} files written {SYM_DOT} "
        f"[{warning_style}]{warnings} warnings[/{warning_style}]"
    )
    for path in written:
        line = Text("  ")
        line.append(str(path), style="bold")
        console.print(line)
    if highlight_stats is not None:
        console.print(f"  highlights: {format_tally(highlight_stats)}")


def print_warning(message: str) -> None:
    """Print a non-fatal warning."""
    line = Text(f"  {SYM_WARN} ", style="yellow")
    line.append(message)
    console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold] – in-progress images were finished")
