"""Manifest structure: the declared ordering of a module's content.

A manifest entry is either a key (a leaf) or an array whose first element is
the node's key and whose remaining elements are nested entries::

    ["intro", ["advanced", "tips", ["faq", "billing"]]]

Entries are parsed once, when the manifest is loaded, into ``StructureLeaf``
/ ``StructureNode`` values so the tree builder never inspects raw JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from docbundler.errors import ManifestError

MANIFEST_NAME = "structure.json"


@dataclass(frozen=True)
class StructureLeaf:
    key: str


@dataclass(frozen=True)
class StructureNode:
    key: str
    children: tuple["StructureEntry", ...] = field(default_factory=tuple)


StructureEntry = Union[StructureLeaf, StructureNode]


def parse_entry(value: Any, module: str = "") -> StructureEntry | None:
    """Parse one raw manifest entry.

    Returns:
        The parsed entry, or ``None`` for an empty array.

    Raises:
        ManifestError: If the value is neither a string nor an array, or an
            array's first element is not a string.
    """
    if isinstance(value, str):
        return StructureLeaf(value)

    if isinstance(value, list):
        if not value:
            return None
        head, *rest = value
        if not isinstance(head, str):
            raise ManifestError(module, f"array head must be a key, got {head!r}")
        children = tuple(
            child for child in (parse_entry(item, module) for item in rest) if child is not None
        )
        return StructureNode(head, children)

    raise ManifestError(module, f"entries must be keys or arrays, got {value!r}")


def parse_manifest(data: Any, module: str = "") -> list[StructureEntry | None]:
    """Parse a whole manifest (a JSON array of entries).

    A bare string is accepted as a single-entry manifest.  Empty arrays are
    kept as ``None`` so they build to nothing, like any other unresolvable
    entry.
    """
    if isinstance(data, str):
        data = [data]
    if not isinstance(data, list):
        raise ManifestError(module, f"top level must be an array, got {type(data).__name__}")
    return [parse_entry(item, module) for item in data]
