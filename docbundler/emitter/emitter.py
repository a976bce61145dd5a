"""Bundle emitter.

Writes, for one module:

* ``<target>/<module>.json`` -- the module's ordered document forest.
* ``<target>/<module>.meta.json`` -- metadata for its static assets.

Asset directories found among the module's content are copied to
``<static>/<basename>``.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.table import Table

from docbundler.config import Config
from docbundler.content.models import AssetMeta
from docbundler.emitter.assets import collect_assets
from docbundler.modules.explorer import ModuleResult
from docbundler.modules.tree import build_forest
from docbundler.utils import console, copy_tree, ensure_dir, print_info, save_json


class EmitReport(BaseModel):
    """What was written for one module."""

    module: str
    sections: int = Field(default=0, ge=0, description="Top-level nodes in the bundle")
    assets: int = Field(default=0, ge=0, description="Probed static assets")
    content_path: Path
    meta_path: Path


def print_asset_table(meta: dict[str, AssetMeta], title: str) -> None:
    """Print one row per probed asset."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Asset", style="dim", no_wrap=True)
    table.add_column("Type")
    table.add_column("Width", justify="right")
    table.add_column("Height", justify="right")

    for key, asset in meta.items():
        width = str(asset.size.width) if asset.size else ""
        height = str(asset.size.height) if asset.size else ""
        table.add_row(escape(key), escape(asset.type), width, height)

    console.print(table)


async def emit_module(result: ModuleResult, config: Config) -> EmitReport:
    """Build the module's tree and write its bundles.

    Args:
        result: The explored module.
        config: Run configuration (target and static directories).

    Returns:
        An ``EmitReport`` describing the written files.
    """
    target = ensure_dir(config.target_path)
    content_target = target / f"{result.name}.json"
    meta_target = target / f"{result.name}.meta.json"

    print_info(f"||| emitting {content_target}")

    forest = build_forest(result.mappings, result.structure, result.name)
    model = [node.model_dump() for node in forest]

    meta: dict[str, AssetMeta] = {}
    directories = result.asset_directories()

    if directories:
        print_info("||| moving static contents, collecting meta data")
        meta = await collect_assets(directories)

        if meta:
            print_info(f"||||| {len(meta)} properties to emit at {meta_target}")
            print_asset_table(meta, title=f"{result.name} assets")

        static = config.static_path
        await asyncio.gather(
            *(copy_tree(directory, static / os.path.basename(directory)) for directory in directories)
        )

    await asyncio.gather(
        save_json(model, content_target),
        save_json({key: asset.model_dump(exclude_none=True) for key, asset in meta.items()}, meta_target),
    )

    print_info(f"|||| {len(forest)} sections emitted at {content_target}")

    return EmitReport(
        module=result.name,
        sections=len(forest),
        assets=len(meta),
        content_path=content_target,
        meta_path=meta_target,
    )
