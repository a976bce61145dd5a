"""Tree builder: flat key/document mapping + manifest entry -> ordered tree.

Children follow the declared manifest order, never the order in which
documents were resolved.  A key that is missing from the mapping drops that
node (and the branch below it) with a warning; the rest of the tree is still
built.
"""

from __future__ import annotations

from typing import Any

from docbundler.content.models import Document, Mapping, TreeNode
from docbundler.modules.structure import StructureLeaf, StructureNode, parse_entry
from docbundler.utils import print_warning


def _lookup(mapping: Mapping, key: str, module: str) -> Document | None:
    document = mapping.get(key)
    if not isinstance(document, Document):
        print_warning(f"|||| can not find child module {key} inside the {module} module")
        return None
    return document


def build_tree(mapping: Mapping, entry: Any, module: str = "") -> TreeNode | None:
    """Materialise one manifest entry into a ``TreeNode``.

    Args:
        mapping: Documents of the module, keyed by content key.
        entry: A parsed ``StructureLeaf``/``StructureNode``, ``None``, or a
            raw manifest value (string or array), which is parsed first.
        module: Module name, used in diagnostics.

    Returns:
        A new ``TreeNode`` (never the mapping's own record), or ``None`` when
        the entry is empty or its key is unknown.
    """
    if entry is not None and not isinstance(entry, (StructureLeaf, StructureNode)):
        entry = parse_entry(entry, module)
    if entry is None:
        return None

    document = _lookup(mapping, entry.key, module)
    if document is None:
        return None

    if isinstance(entry, StructureLeaf):
        return TreeNode.from_document(document)

    children = [build_tree(mapping, child, module) for child in entry.children]
    return TreeNode.from_document(document, [child for child in children if child is not None])


def build_forest(mapping: Mapping, structure: list[Any], module: str = "") -> list[TreeNode]:
    """Build every top-level manifest entry, dropping the ones that resolve to nothing."""
    nodes = (build_tree(mapping, entry, module) for entry in structure)
    return [node for node in nodes if node is not None]
