"""Command-line interface for assetsmith.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Commands:
- highlight: Generate outline variants for a file or folder of sprites
- sync: Refresh the registry and regenerate its modules
- check: Verify the runtime and declaration modules agree
"""

from assetsmith.cli.app import cli, main

__all__ = ["cli", "main"]
