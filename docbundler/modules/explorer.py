"""Module explorer: one module directory -> merged mapping + manifest.

A module is a top-level directory holding a ``structure.json`` manifest and
any number of content directories.  Each content directory is resolved
concurrently and the results are merged into a single flat mapping.
"""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from docbundler.config import Config
from docbundler.content.models import Mapping
from docbundler.content.renderer import MarkdownRenderer
from docbundler.content.resolver import resolve_content
from docbundler.errors import ManifestError
from docbundler.modules.guard import traverse
from docbundler.modules.structure import MANIFEST_NAME, StructureEntry, parse_manifest
from docbundler.utils import list_dir, load_json, print_info, print_warning


@dataclass
class ModuleResult:
    """Everything found for one module; handed from the explorer to the emitter."""

    name: str
    mappings: Mapping = field(default_factory=dict)
    structure: list[StructureEntry | None] = field(default_factory=list)

    def asset_directories(self) -> list[str]:
        """Raw directory paths collected alongside the documents."""
        return [value for value in self.mappings.values() if isinstance(value, str)]


def merge_mappings(target: Mapping, source: Mapping, module: str) -> None:
    """Merge *source* into *target*; later keys win, collisions are reported."""
    for key, value in source.items():
        if key in target:
            print_warning(f"|| duplicate key {key} inside the {module} module, keeping the last one")
        target[key] = value


async def load_manifest(location: str, module: str) -> list[StructureEntry | None]:
    """Read and parse ``<location>/structure.json``.

    Raises:
        ManifestError: If the file is not valid JSON or has the wrong shape.
    """
    try:
        data = await load_json(os.path.join(location, MANIFEST_NAME))
    except json.JSONDecodeError as exc:
        raise ManifestError(module, str(exc)) from exc
    return parse_manifest(data, module)


async def explore_module(
    location: str | Path,
    config: Config,
    renderer: MarkdownRenderer,
) -> ModuleResult | None:
    """Resolve every content directory of a module.

    Args:
        location: The module directory.
        config: Run configuration.
        renderer: Markdown renderer shared by all reads.

    Returns:
        The merged ``ModuleResult``, or ``None`` (with a warning) when the
        module has no manifest.

    Raises:
        ManifestError: If the manifest exists but cannot be used.
    """
    location = os.fspath(location)
    module = os.path.basename(location)
    files = [name for name in await list_dir(location) if not config.is_excluded(name)]

    if MANIFEST_NAME not in files:
        print_warning(f"excluding  {location} | missing {MANIFEST_NAME}")
        return None

    files.remove(MANIFEST_NAME)
    structure = await load_manifest(location, module)

    print_info(f"traversing {location} | contents.length = {len(files)}")

    async def resolve(path: str) -> Mapping:
        return await resolve_content(path, config, renderer)

    results = await asyncio.gather(
        *(traverse(os.path.join(location, name), resolve, config) for name in files)
    )

    result = ModuleResult(name=module, structure=structure)
    for mapping in results:
        if mapping is not None:
            merge_mappings(result.mappings, mapping, module)
    return result
