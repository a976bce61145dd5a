"""Static asset probing: MIME type and image dimensions.

Pillow identifies the formats it can decode (and measures them); anything
else falls back to the standard ``mimetypes`` table.  A failure on one asset
is logged and yields an empty placeholder, never an aborted batch.
"""

from __future__ import annotations

import asyncio
import mimetypes
import os
import posixpath
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from docbundler.content.models import AssetMeta, ImageSize
from docbundler.utils import list_dir, print_error, run_blocking

FALLBACK_MIME = "application/octet-stream"


def asset_key(directory: str | Path, name: str) -> str:
    """Lower-cased ``<directory basename>/<name>`` key used in the meta bundle."""
    return posixpath.join(os.path.basename(os.path.normpath(directory)), name).lower()


def probe_file(path: str | Path) -> tuple[str, ImageSize | None]:
    """Detect the MIME type of a file and, for images, its pixel size.

    Raises:
        OSError: If the file cannot be read.
        PIL.Image.DecompressionBombError: If the image exceeds Pillow's pixel limit.
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            mime = Image.MIME.get(image.format or "")
            width, height = image.size
    except UnidentifiedImageError:
        mime = None
    else:
        if mime and mime.startswith("image"):
            return mime, ImageSize(width=width, height=height)

    guessed, _ = mimetypes.guess_type(path.name)
    return mime or guessed or FALLBACK_MIME, None


async def probe_asset(directory: str | Path, name: str) -> AssetMeta:
    """Probe one asset, returning a placeholder with an empty type on error."""
    key = asset_key(directory, name)
    try:
        mime, size = await run_blocking(probe_file, os.path.join(directory, name))
    except (OSError, Image.DecompressionBombError) as exc:
        print_error(f"||||| can not probe {key}: {exc}")
        return AssetMeta(key=key)
    return AssetMeta(key=key, type=mime, size=size)


async def _asset_files(directory: str) -> list[str]:
    names = await list_dir(directory)
    checks = await asyncio.gather(
        *(run_blocking(os.path.isfile, os.path.join(directory, name)) for name in names)
    )
    return [name for name, is_file in zip(names, checks) if is_file]


async def collect_assets(directories: list[str]) -> dict[str, AssetMeta]:
    """Probe every file directly inside each asset directory.

    Returns:
        Asset metadata keyed by ``asset_key``, in sorted key order.
    """
    listings = await asyncio.gather(*(_asset_files(directory) for directory in directories))
    probes = await asyncio.gather(
        *(
            probe_asset(directory, name)
            for directory, names in zip(directories, listings)
            for name in names
        )
    )
    return {meta.key: meta for meta in sorted(probes, key=lambda meta: meta.key)}
