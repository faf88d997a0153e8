"""Shared utility functions for create-projex.

Provides the Rich-based ``Logger`` that every component receives, async
command execution used by hooks and the post-creation flow, and JSON I/O.
"""

from __future__ import annotations

import asyncio
import io
import json
import os
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
_shared_console = console

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class Logger:
    """Console logger configured once and injected into every component.

    The debug switch is a property of the instance rather than process-wide
    state, so two loggers with different settings can coexist (tests rely on
    this).

    Args:
        console: Rich console to print to.  Defaults to the shared one.
        debug: Whether :meth:`debug` messages are shown.
    """

    def __init__(self, console: Console | None = None, debug: bool = False) -> None:
        self.console = console if console is not None else _shared_console
        self.debug_enabled = debug

    def set_debug(self, enabled: bool) -> None:
        self.debug_enabled = enabled

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self.console.print(f"[dim]\\[DEBUG] {escape(message)}[/dim]")

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]{escape(message)}[/cyan]")

    def success(self, message: str) -> None:
        """Print a green success message."""
        self.console.print(f"[bold green]✓ {escape(message)}[/bold green]")

    def warn(self, message: str) -> None:
        """Print a yellow warning message."""
        self.console.print(f"[bold yellow]⚠ {escape(message)}[/bold yellow]")

    def error(self, message: str) -> None:
        """Print a red error message."""
        self.console.print(f"[bold red]✗ {escape(message)}[/bold red]")

    def title(self, message: str) -> None:
        self.console.print(f"[bold]{escape(message)}[/bold]")

    def step(self, message: str) -> None:
        self.console.print(f"[dim]→ {escape(message)}[/dim]")

    def nl(self) -> None:
        self.console.print()

    def summary_table(self, data: dict[str, Any], title: str = "Summary") -> None:
        """Print a two-column key/value summary table.

        Args:
            data: Mapping of label -> value.
            title: Table title.
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Item", style="dim", no_wrap=True)
        table.add_column("Value")

        for key, value in data.items():
            table.add_row(escape(str(key)), escape(str(value)))

        self.console.print(table)
        self.console.print()


def quiet_logger() -> Logger:
    """Return a logger that discards everything (default for library use)."""
    return Logger(console=Console(file=io.StringIO(), force_terminal=False))


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: int | None = 120,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a shell command asynchronously.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely (package installs, dev servers).
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        OSError: If the executable cannot be started (e.g. not on ``PATH``).
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    if isinstance(cmd, list):
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    else:
        process = await asyncio.create_subprocess_shell(
            cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (
            -1,
            "",
            f"Command timed out after {timeout}s: {cmd if isinstance(cmd, str) else ' '.join(cmd)}",
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data
