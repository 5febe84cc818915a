"""Upstream asset sync adapters.

The upstream tool uploads images and refreshes the registry with the ids
it assigns. Assetsmith only needs to run it; which tool that is, and how
it finds credentials, is the adapter's business.
"""

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from assetsmith.exceptions import UpstreamSyncError


@dataclass(frozen=True)
class SyncResult:
    """Result of an upstream sync run."""

    command: str
    output: str


class AssetSyncer(Protocol):
    """Anything that can run the upstream sync."""

    def sync(self) -> SyncResult:
        """Run the upstream sync.

        Raises:
            UpstreamSyncError: If the sync fails
        """
        ...


class CommandSyncer:
    """Runs an external command such as ``asphalt sync``.

    Example:
        CommandSyncer(["asphalt", "sync"]).sync()
    """

    def __init__(self, command: Sequence[str], timeout: float | None = None) -> None:
        if not command:
            raise ValueError("upstream command must not be empty")
        self.command = list(command)
        self.timeout = timeout

    @property
    def display(self) -> str:
        return shlex.join(self.command)

    def sync(self) -> SyncResult:
        try:
            completed = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise UpstreamSyncError(self.display, f"command not found: {self.command[0]}") from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise UpstreamSyncError(self.display, str(e)) from e

        if completed.returncode != 0:
            detail = completed.stderr.strip() or completed.stdout.strip()
            raise UpstreamSyncError(
                self.display,
                f"exit status {completed.returncode}" + (f": {detail}" if detail else ""),
            )
        return SyncResult(command=self.display, output=completed.stdout)
