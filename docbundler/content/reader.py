"""Markdown reader: turns one content file into a ``Document``.

Two optional single-line directives may appear anywhere in the file::

    <!--TITLE:Custom title-->
    <!--ABOUT:One line summary-->

The first occurrence of each is spliced out of the source before rendering
and its payload becomes the document's title / about text.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from docbundler.content.models import Document
from docbundler.content.renderer import MarkdownRenderer
from docbundler.utils import is_directory, print_info, read_text, run_blocking

TITLE_RE = re.compile(r"<!--TITLE:(.*?)-->")
ABOUT_RE = re.compile(r"<!--ABOUT:(.*?)-->")

MARKDOWN_SUFFIX = ".md"


def document_id(filename: str) -> str:
    """Return the content key for *filename* (its basename without ``.md``)."""
    name = os.path.basename(filename)
    if name.endswith(MARKDOWN_SUFFIX):
        return name[: -len(MARKDOWN_SUFFIX)]
    return name


def default_title(doc_id: str) -> str:
    """Derive a title from an id: hyphens become spaces, words are capitalised.

    Only the first letter of each word is touched, so ``"api-FAQ"`` becomes
    ``"Api FAQ"``.
    """
    words = doc_id.replace("-", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def extract_directive(pattern: re.Pattern[str], markdown: str) -> tuple[str | None, str]:
    """Splice the first *pattern* match out of *markdown*.

    Returns:
        ``(payload, remaining_markdown)``; *payload* is ``None`` when the
        directive is absent and the text is returned unchanged.
    """
    match = pattern.search(markdown)
    if match is None:
        return None, markdown
    return match.group(1), markdown[: match.start()] + markdown[match.end():]


def parse_document(
    doc_id: str,
    markdown: str,
    renderer: MarkdownRenderer,
    base_dir: str | Path = ".",
) -> Document:
    """Build a ``Document`` from raw markdown text."""
    title, markdown = extract_directive(TITLE_RE, markdown)
    about, markdown = extract_directive(ABOUT_RE, markdown)

    return Document(
        id=doc_id,
        title=title if title is not None else default_title(doc_id),
        about=about if about is not None else "",
        content=renderer.render(markdown, base_dir=base_dir).strip(),
    )


async def read_document(location: str | Path, renderer: MarkdownRenderer) -> Document | str:
    """Read and render one content file.

    Directories are not read; their path is handed back unchanged so the
    caller can treat them as asset directories.

    Args:
        location: Path to a markdown file or a directory.
        renderer: Renderer used for the markdown body.

    Returns:
        A ``Document`` for files, or ``str(location)`` for directories.
    """
    location = os.fspath(location)
    print_info(f"|| reading {location}")

    if await is_directory(location):
        return location

    # undecodable bytes become U+FFFD
    markdown = await read_text(location, errors="replace")
    # rendering may open local images to measure them
    return await run_blocking(
        parse_document,
        document_id(location),
        markdown,
        renderer,
        base_dir=os.path.dirname(location),
    )
