"""Content reading: markdown files and content directories.

Usage::

    from docbundler.content import MarkdownRenderer, read_document, resolve_content

    renderer = MarkdownRenderer()
    document = await read_document("guide/basics/intro.md", renderer)
    mapping = await resolve_content("guide/basics", config, renderer)
"""

from docbundler.content.models import AssetMeta, Document, ImageSize, Mapping, TreeNode
from docbundler.content.reader import default_title, document_id, parse_document, read_document
from docbundler.content.renderer import MarkdownRenderer
from docbundler.content.resolver import directory_key, resolve_content

__all__ = [
    "AssetMeta",
    "Document",
    "ImageSize",
    "Mapping",
    "MarkdownRenderer",
    "TreeNode",
    "default_title",
    "directory_key",
    "document_id",
    "parse_document",
    "read_document",
    "resolve_content",
]
