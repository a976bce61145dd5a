"""Content resolver: one content directory -> key/document mapping.

Every non-excluded entry of the directory is read concurrently.  Files are
keyed by their stem; nested directories are kept as raw paths under a
dotted key derived from their location below the root directory, e.g.
``<root>/guide/media/screens`` -> ``guide.media.screens``.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from docbundler.config import Config
from docbundler.content.models import Mapping
from docbundler.content.reader import document_id, read_document
from docbundler.content.renderer import MarkdownRenderer
from docbundler.utils import list_dir, print_info


def directory_key(location: str, root: str | Path) -> str:
    """Turn an asset directory path into its dotted mapping key."""
    root_prefix = os.path.normpath(os.fspath(root))
    key = os.path.normpath(location)
    if key.startswith(root_prefix):
        key = key[len(root_prefix):]
    key = key.lstrip(os.sep)
    if os.altsep:
        key = key.replace(os.altsep, ".")
    return key.replace(os.sep, ".")


async def resolve_content(location: str | Path, config: Config, renderer: MarkdownRenderer) -> Mapping:
    """Read every entry of a content directory.

    Args:
        location: The content directory (one level below a module).
        config: Run configuration (exclusion pattern, root directory).
        renderer: Markdown renderer shared by all reads.

    Returns:
        Mapping from content key to ``Document`` or asset directory path.
    """
    location = os.fspath(location)
    files = [name for name in await list_dir(location) if not config.is_excluded(name)]

    print_info(f"| traversing {location} | contents.length = {len(files)}")

    results = await asyncio.gather(
        *(read_document(os.path.join(location, name), renderer) for name in files)
    )

    mapping: Mapping = {}
    for name, result in zip(files, results):
        if not result:
            continue
        if isinstance(result, str):
            mapping[directory_key(result, config.directory)] = result
        else:
            mapping[document_id(name)] = result
    return mapping
