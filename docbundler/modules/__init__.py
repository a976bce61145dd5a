"""Module discovery, manifest parsing and tree building.

Usage::

    from docbundler.modules import build_forest, explore_module

    result = await explore_module("docs-src/guide", config, renderer)
    if result is not None:
        forest = build_forest(result.mappings, result.structure, result.name)
"""

from docbundler.modules.explorer import ModuleResult, explore_module, merge_mappings
from docbundler.modules.guard import traverse
from docbundler.modules.structure import (
    MANIFEST_NAME,
    StructureEntry,
    StructureLeaf,
    StructureNode,
    parse_entry,
    parse_manifest,
)
from docbundler.modules.tree import build_forest, build_tree

__all__ = [
    "MANIFEST_NAME",
    "ModuleResult",
    "StructureEntry",
    "StructureLeaf",
    "StructureNode",
    "build_forest",
    "build_tree",
    "explore_module",
    "merge_mappings",
    "parse_entry",
    "parse_manifest",
    "traverse",
]
