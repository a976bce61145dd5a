"""Shared utility functions for docbundler.

Provides thread-offloaded file-system helpers, JSON I/O, duration
formatting, and the Rich-based terminal output used by every stage of the
crawl.  Blocking calls are pushed onto the default executor so directory
scans and file reads can fan out on the event loop.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import Any, TypeVar

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()
error_console = Console(stderr=True)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Executor helpers
# ---------------------------------------------------------------------------


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking callable in the default thread-pool executor.

    Args:
        func: The callable to run.
        *args: Positional arguments forwarded to *func*.
        **kwargs: Keyword arguments forwarded to *func*.

    Returns:
        Whatever *func* returns.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


async def list_dir(path: str | Path) -> list[str]:
    """Return the entry names of a directory, sorted for stable ordering."""
    names = await run_blocking(os.listdir, path)
    return sorted(names)


async def is_directory(path: str | Path) -> bool:
    """Return ``True`` if *path* exists and is a directory."""
    return await run_blocking(os.path.isdir, path)


async def read_text(path: str | Path, errors: str = "strict") -> str:
    """Read a UTF-8 text file off the event loop.

    *errors* is passed to the decoder; ``"replace"`` substitutes U+FFFD for
    undecodable bytes instead of raising ``UnicodeDecodeError``.
    """
    return await run_blocking(Path(path).read_text, encoding="utf-8", errors=errors)


async def copy_tree(source: str | Path, destination: str | Path) -> None:
    """Copy a directory tree, replacing files that already exist at *destination*."""
    await run_blocking(shutil.copytree, source, destination, dirs_exist_ok=True)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


async def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = await read_text(path)
    return json.loads(raw)


def dump_json(data: Any) -> str:
    """Serialise *data* as indented JSON, keeping insertion order."""
    return json.dumps(data, indent=2, ensure_ascii=False)


async def save_json(data: Any, path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    The write itself is performed in a thread-pool executor to avoid
    blocking the event loop on large bundles.

    Args:
        data: Serialisable data (dict or list).
        path: Destination file path.
    """
    file_path = Path(path)
    content = dump_json(data)
    await run_blocking(file_path.write_text, content, "utf-8")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory if it does not already exist.

    Only "already exists" is tolerated; any other ``OSError`` (missing
    parent, permissions) propagates to the caller.

    Returns:
        The ``Path`` object for the directory.
    """
    dir_path = Path(path)
    try:
        dir_path.mkdir()
    except FileExistsError:
        pass
    return dir_path


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60

    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(title: str, subtitle: str = "") -> None:
    """Print the start-up banner panel."""
    body = f"[bold bright_cyan]{title}[/bold bright_cyan]"
    if subtitle:
        body += f"\n[dim]{subtitle}[/dim]"
    console.print(Panel(body, border_style="dim cyan", expand=False))


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="bold white on red", no_wrap=True)
    table.add_column("Value", style="red")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_line(amount: int = 1) -> None:
    """Print *amount* blank lines."""
    for _ in range(amount):
        console.print()


def print_info(message: str) -> None:
    """Print a cyan progress message."""
    console.print(f"[bold cyan]{escape(message)}[/bold cyan]", highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", highlight=False)


def print_error(message: str) -> None:
    """Print a red error message on stderr."""
    error_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)
