"""Shared pytest fixtures for the docbundler test suite.

Provides reusable fixtures for:
- Building documentation trees (modules, manifests, markdown files)
- A ``Config`` rooted in a temporary directory
- A shared markdown renderer
- Tiny PNG assets written with Pillow
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from PIL import Image

from docbundler.config import Config
from docbundler.content.renderer import MarkdownRenderer


# ---------------------------------------------------------------------------
# Tree builders
# ---------------------------------------------------------------------------

def write_module(
    root: Path,
    name: str,
    structure: Any | None,
    contents: dict[str, dict[str, str]],
) -> Path:
    """Create ``root/name`` with an optional manifest and content directories.

    Args:
        root: Documentation root.
        name: Module directory name.
        structure: Manifest value, or ``None`` to omit ``structure.json``.
        contents: ``{content_dir: {filename: text}}``.
    """
    module = root / name
    module.mkdir(parents=True, exist_ok=True)
    if structure is not None:
        (module / "structure.json").write_text(json.dumps(structure), encoding="utf-8")
    for directory, files in contents.items():
        content_dir = module / directory
        content_dir.mkdir(exist_ok=True)
        for filename, text in files.items():
            (content_dir / filename).write_text(text, encoding="utf-8")
    return module


def write_png(path: Path, size: tuple[int, int] = (4, 3)) -> Path:
    """Write a solid-colour PNG of *size* pixels."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 30, 30)).save(path, format="PNG")
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    """Empty documentation root directory."""
    root = tmp_path / "content"
    root.mkdir()
    yield root


@pytest.fixture
def config(docs_root: Path) -> Config:
    """Confirmed configuration rooted at ``docs_root``."""
    return Config(directory=docs_root, confirm=True)


@pytest.fixture
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


@pytest.fixture
def module_factory(docs_root: Path) -> Callable[..., Path]:
    """Factory wrapping :func:`write_module` for ``docs_root``."""

    def _make(name: str, structure: Any | None, contents: dict[str, dict[str, str]]) -> Path:
        return write_module(docs_root, name, structure, contents)

    return _make


@pytest.fixture
def guide_module(module_factory: Callable[..., Path]) -> Path:
    """A ``guide`` module with two content directories."""
    return module_factory(
        "guide",
        ["intro", ["advanced", "tips"]],
        {
            "basics": {
                "intro.md": "<!--TITLE:Welcome-->\n# Intro\n\nHello *world*",
                "tips.md": "Some tips.",
            },
            "deep-dive": {
                "advanced.md": "<!--ABOUT:For experts-->\nAdvanced topics.",
            },
        },
    )


@pytest.fixture
def png_factory() -> Callable[..., Path]:
    """Factory wrapping :func:`write_png`."""
    return write_png
