"""CLI application entry point for assetsmith.

This module provides the main CLI interface using Typer.
"""

import shlex
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from assetsmith import __version__
from assetsmith.cli.output import (
    SYM_OK,
    console,
    print_batch_summary,
    print_cancellation_notice,
    print_error,
    print_header,
    print_outcome,
    print_step,
    print_sync_summary,
    print_warning,
)
from assetsmith.config import (
    AssetsmithSettings,
    HighlightConfig,
    LoggingConfig,
    ProcessingConfig,
    SyncConfig,
)
from assetsmith.core import Augmenter, HighlightProcessor, scan
from assetsmith.domain import HighlightOutcome, highlight_key_for
from assetsmith.exceptions import AssetIOError, AssetsmithError, RegistryError, UpstreamSyncError
from assetsmith.io import CommandSyncer, RegistryEmitter, load_registry, verify_consistency, write_modules
from assetsmith.utils import configure_logging

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Create the Typer app
app = typer.Typer(
    name="assetsmith",
    help="Generate highlight variants of sprites and keep the asset registry modules in sync.",
    add_completion=False,
    no_args_is_help=True,
)

LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Verbose console output",
    ),
]
QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Assetsmith[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Asset pipeline tooling for sprite highlights and registry codegen."""


def _setup_logging(
    log_file: Path | None,
    log_level: str,
    verbose: bool,
    quiet: bool,
) -> LoggingConfig:
    """Validate the shared logging flags and configure logging.

    Raises:
        typer.Exit: If the flags are inconsistent
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    level = log_level.upper()
    if level not in LOG_LEVELS:
        print_error(
            f"Invalid log level: {log_level}",
            details=f"Valid values: {', '.join(LOG_LEVELS)}",
        )
        raise typer.Exit(code=1)

    config = LoggingConfig(log_file=log_file, log_level="INFO" if verbose else level)
    configure_logging(
        log_file=config.log_file,
        console_level=config.log_level,
        file_level=config.file_log_level,
        quiet=quiet,
    )
    return config


@app.command()
def highlight(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="PNG file or folder of PNG files",
            show_default=False,
        ),
    ],
    thickness: Annotated[
        int,
        typer.Option(
            "--thickness",
            "-t",
            help="Outline thickness in pixels",
            min=1,
        ),
    ] = 1,
    color: Annotated[
        str,
        typer.Option(
            "--color",
            "-c",
            help="Outline color as RRGGBB",
        ),
    ] = "FFFFFF",
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Regenerate highlights that already exist",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be generated without writing anything",
        ),
    ] = False,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Write a ``name-highlight.png`` outline next to every ``name.png``.

    The outline is the ring of pixels within THICKNESS steps of the sprite's
    silhouette, painted in COLOR. Existing highlights are kept unless
    --force is given.

    Example:
        assetsmith highlight assets/images --thickness 2
    """
    logging_config = _setup_logging(log_file, log_level, verbose, quiet)

    # Validate input path exists
    if not input_path.exists():
        print_error(
            f"Input path not found: {input_path}",
            details=f"The path '{input_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    try:
        highlight_config = HighlightConfig(thickness=thickness, outline_color=color, force=force)
    except ValidationError:
        print_error(f"Invalid color: {color}", details="Expected six hex digits, e.g. FFFFFF")
        raise typer.Exit(code=1) from None

    settings = AssetsmithSettings(
        highlight=highlight_config,
        processing=ProcessingConfig(max_workers=workers),
        logging=logging_config,
    )

    if not quiet:
        print_header(__version__)
        print_step("Generating highlights (dry run)" if dry_run else "Generating highlights")

    def report(_completed: int, outcome: HighlightOutcome) -> None:
        if not quiet:
            print_outcome(outcome)

    processor = HighlightProcessor(settings.highlight, settings.processing)
    try:
        stats = processor.run(scan(input_path), dry_run=dry_run, progress_callback=report)
    except KeyboardInterrupt:
        if not quiet:
            print_cancellation_notice()
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code
    except AssetsmithError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if stats.total == 0:
        if not quiet:
            console.print("\nNo PNG images found. Nothing to do.")
        raise typer.Exit(code=0)

    if not quiet:
        print_batch_summary(stats, dry_run=dry_run)

    if not stats.succeeded:
        if quiet:
            for path, cause in stats.failures:
                print_error(f"{path}: {cause}")
        raise typer.Exit(code=1)


@app.command()
def sync(
    assets_input: Annotated[
        Path | None,
        typer.Option(
            "--assets-input",
            help="Registry to read, .luau or .json (default: src/shared/data/assets/assets.luau)",
        ),
    ] = None,
    assets_output: Annotated[
        Path | None,
        typer.Option(
            "--assets-output",
            help="Runtime module to write (default: src/shared/data/assets/assets.luau)",
        ),
    ] = None,
    dts_output: Annotated[
        Path | None,
        typer.Option(
            "--dts-output",
            help="Declaration module to write (default: src/shared/data/assets/assets.d.ts)",
        ),
    ] = None,
    images_folder: Annotated[
        Path | None,
        typer.Option(
            "--images-folder",
            help="Folder that registry keys are relative to (default: assets/images)",
        ),
    ] = None,
    auto_highlight: Annotated[
        bool,
        typer.Option(
            "--auto-highlight",
            help="Generate missing highlight variants while syncing",
        ),
    ] = False,
    highlight_thickness: Annotated[
        int,
        typer.Option(
            "--highlight-thickness",
            help="Outline thickness for generated highlights",
            min=1,
        ),
    ] = 1,
    highlight_color: Annotated[
        str,
        typer.Option(
            "--highlight-color",
            help="Outline color for generated highlights as RRGGBB",
        ),
    ] = "FFFFFF",
    highlight_force: Annotated[
        bool,
        typer.Option(
            "--highlight-force",
            help="Regenerate highlights that already exist",
        ),
    ] = False,
    upstream_command: Annotated[
        str | None,
        typer.Option(
            "--upstream-command",
            help="Command that uploads images and refreshes the registry, run first",
        ),
    ] = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Refresh the registry and regenerate its runtime and declaration modules.

    Every entry gets its dimensions re-measured from the image on disk and
    its highlight id linked to the registered ``-highlight`` variant.

    Example:
        assetsmith sync --auto-highlight --upstream-command "asphalt sync"
    """
    logging_config = _setup_logging(log_file, log_level, verbose, quiet)

    paths = {
        "assets_input": assets_input,
        "assets_output": assets_output,
        "dts_output": dts_output,
        "images_folder": images_folder,
    }
    try:
        settings = AssetsmithSettings(
            highlight=HighlightConfig(
                thickness=highlight_thickness,
                outline_color=highlight_color,
                force=highlight_force,
                auto_highlight=auto_highlight,
            ),
            sync=SyncConfig(
                **{name: value for name, value in paths.items() if value is not None},
                upstream_command=shlex.split(upstream_command) if upstream_command else None,
            ),
            logging=logging_config,
        )
    except (ValidationError, ValueError) as e:
        print_error("Invalid options", details=str(e))
        raise typer.Exit(code=1) from None

    if not quiet:
        print_header(__version__)

    try:
        if settings.sync.upstream_command:
            syncer = CommandSyncer(settings.sync.upstream_command)
            if not quiet:
                print_step(f"Running {syncer.display}")
            syncer.sync()

        if not quiet:
            print_step(f"Loading {settings.sync.assets_input}")
        registry = load_registry(settings.sync.assets_input)

        if not quiet:
            print_step(f"Measuring {len(registry)} assets")
        result = Augmenter(settings.highlight).augment(registry, settings.sync.images_folder)

        if not quiet:
            for warning in result.warnings:
                print_warning(str(warning))
            for key in result.pending_highlights:
                print_warning(
                    f"'{highlight_key_for(key)}' exists but is not registered yet; "
                    "run the upstream sync and sync again to link it"
                )

        if not quiet:
            print_step("Writing modules")
        written = write_modules(
            RegistryEmitter().emit(registry),
            settings.sync.assets_output,
            settings.sync.dts_output,
        )
    except KeyboardInterrupt:
        if not quiet:
            print_cancellation_notice()
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code
    except UpstreamSyncError as e:
        print_error(f"Upstream sync failed: {e.reason}", details=e.command)
        raise typer.Exit(code=1) from None
    except RegistryError as e:
        print_error(f"Could not load registry: {e}")
        raise typer.Exit(code=1) from None
    except AssetIOError as e:
        print_error(f"Could not access '{e.path}': {e.reason}")
        raise typer.Exit(code=1) from None
    except AssetsmithError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if not quiet:
        print_sync_summary(
            entries=len(registry),
            written=written,
            warnings=len(result.warnings) + len(result.pending_highlights),
            highlight_stats=result.highlight_stats if settings.highlight.auto_highlight else None,
        )

    if result.failed_count > 0:
        if quiet:
            for path, cause in result.highlight_stats.failures:
                print_error(f"{path}: {cause}")
        raise typer.Exit(code=1)


@app.command()
def check(
    runtime_module: Annotated[
        Path,
        typer.Argument(
            help="Generated Luau runtime module",
            show_default=False,
        ),
    ],
    declarations: Annotated[
        Path,
        typer.Argument(
            help="Generated TypeScript declaration module",
            show_default=False,
        ),
    ],
    quiet: QuietOption = False,
) -> None:
    """Verify that a runtime module and a declaration module describe the same assets.

    Example:
        assetsmith check assets.luau assets.d.ts
    """
    try:
        runtime_text = runtime_module.read_text(encoding="utf-8")
        declarations_text = declarations.read_text(encoding="utf-8")
    except OSError as e:
        print_error(f"Could not read '{e.filename}': {e.strerror}")
        raise typer.Exit(code=1) from None

    try:
        problems = verify_consistency(runtime_text, declarations_text)
    except RegistryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if problems:
        print_error(f"{len(problems)} inconsistencies found")
        for problem in problems:
            print_warning(problem)
        raise typer.Exit(code=1)

    if not quiet:
        console.print(f"[bold green]{SYM_OK} Consistent[/bold green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
