"""Traversal guard applied before descending into any path."""

from __future__ import annotations

import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from docbundler.config import Config
from docbundler.utils import is_directory, print_warning

T = TypeVar("T")


async def traverse(
    location: str | Path,
    action: Callable[[str], Awaitable[T]],
    config: Config,
) -> T | None:
    """Run *action* on *location* if it is a non-excluded directory.

    Excluded names are skipped with a warning.  Plain files are skipped
    silently since they are expected next to directories.

    Returns:
        The action's result, or ``None`` when the path was skipped.
    """
    location = os.fspath(location)
    if config.is_excluded(location):
        print_warning(f"excluding  {location}")
        return None

    if not await is_directory(location):
        return None

    return await action(location)
