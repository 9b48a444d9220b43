"""Helpers shared by commands.

Helpers that print implement :class:`OutputAware`; the runtime hands
them the console right before a command is dispatched.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Protocol, Sequence, runtime_checkable

from rich import box
from rich.console import Console
from rich.table import Table

from .errors import GushError

logger = logging.getLogger(__name__)

_REMOTE_PATH = re.compile(r"[:/]([^/:]+)/([^/]+?)(?:\.git)?/?$")


@runtime_checkable
class OutputAware(Protocol):
    """A helper that needs the invocation's console."""

    def set_console(self, console: Console) -> None: ...


def parse_remote_url(url: str) -> tuple[str, str] | None:
    """Extract ``(org, repo)`` from an SSH or HTTPS remote URL."""
    match = _REMOTE_PATH.search(url.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


class GitHelper:
    """Thin wrapper around the git executable for the working copy."""

    def __init__(self, cwd: str | Path | None = None, timeout: float = 60) -> None:
        self.cwd = cwd
        self.timeout = timeout
        self.console: Console | None = None

    def set_console(self, console: Console) -> None:
        self.console = console

    def run(self, *args: str) -> str:
        """Run ``git <args>`` and return its stripped stdout.

        Raises:
            GushError: If git is missing, times out or exits non-zero.
        """
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.cwd) if self.cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise GushError(f"Could not run {' '.join(cmd)}: {exc}") from exc
        if result.returncode != 0:
            raise GushError(f"{' '.join(cmd)} failed: {result.stderr.strip()}")
        return result.stdout.strip()

    def get_branch_name(self) -> str:
        return self.run("rev-parse", "--abbrev-ref", "HEAD")

    def get_remote_url(self, remote: str = "origin") -> str:
        return self.run("config", "--get", f"remote.{remote}.url")

    def get_repository(self, remote: str = "origin") -> tuple[str, str] | None:
        """Return ``(org, repo)`` for ``remote``, or None when unknown."""
        try:
            url = self.get_remote_url(remote)
        except GushError:
            return None
        return parse_remote_url(url)


class TableHelper:
    """Renders provider records as rich tables."""

    LAYOUTS: tuple[str, ...] = ("default", "compact", "borderless")

    _BOXES = {
        "default": box.ROUNDED,
        "compact": box.SIMPLE,
        "borderless": None,
    }

    def __init__(self) -> None:
        self.console: Console | None = None

    def set_console(self, console: Console) -> None:
        self.console = console

    def build(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        title: str | None = None,
        layout: str = "default",
    ) -> Table:
        if layout not in self._BOXES:
            raise ValueError(
                f"Unknown table layout '{layout}'. Available: {', '.join(self.LAYOUTS)}"
            )
        table = Table(title=title, box=self._BOXES[layout], border_style="cyan")
        for column in columns:
            table.add_column(column, style="bold" if column == columns[0] else None)
        for row in rows:
            table.add_row(*("" if cell is None else str(cell) for cell in row))
        return table

    def render(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        title: str | None = None,
        layout: str = "default",
    ) -> None:
        if self.console is None:
            raise RuntimeError("TableHelper has no console; it is wired by the runtime")
        self.console.print(self.build(columns, rows, title=title, layout=layout))
