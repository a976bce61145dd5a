"""Markdown to HTML rendering.

Wraps Python-Markdown with the extension set used for documentation pages:
raw HTML passthrough, fenced code blocks highlighted by Pygments (falling
back to plain escaped code for unknown languages), typographic quotes and
dashes, tables, attribute lists, plus two in-house extensions:

* ``BareUrlExtension`` turns plain ``http(s)://`` and ``www.`` URLs into
  anchors.
* ``ImageSizeExtension`` understands ``![alt](src =WxH)`` and, when
  autofill is enabled, annotates local images with their pixel size.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString
from PIL import Image

# Python-Markdown placeholder delimiters (STX / ETX) are excluded so stashed
# HTML and entities are never split.
BARE_URL_RE = re.compile(
    r"(?<![\w/\"'=@])((?:https?://|www\.)[^\s<>\"\x02\x03]*[^\s<>\"\x02\x03.,;:!?)\]'])"
)

IMAGE_SIZE_RE = re.compile(
    r"!\[(?P<alt>[^\]]*)\]\(\s*(?P<src>[^\s)]+)\s+=(?P<width>\d*)x(?P<height>\d*)"
    r"(?P<title>\s+\"[^\"]*\")?\s*\)"
)

_SKIP_TAGS = {"a", "code", "pre"}


# ---------------------------------------------------------------------------
# Bare URL autolinking
# ---------------------------------------------------------------------------


class BareUrlTreeprocessor(Treeprocessor):
    """Wrap bare URLs found in text nodes with ``<a>`` elements."""

    def run(self, root: etree.Element) -> None:
        self._walk(root)

    def _anchors(self, pieces: list[str]) -> list[etree.Element]:
        anchors = []
        for url, tail in zip(pieces[1::2], pieces[2::2]):
            href = url if "://" in url else f"http://{url}"
            anchor = etree.Element("a", {"href": href})
            anchor.text = AtomicString(url)
            anchor.tail = tail
            anchors.append(anchor)
        return anchors

    def _walk(self, parent: etree.Element) -> None:
        if parent.text and not isinstance(parent.text, AtomicString):
            pieces = BARE_URL_RE.split(parent.text)
            if len(pieces) > 1:
                parent.text = pieces[0]
                for offset, anchor in enumerate(self._anchors(pieces)):
                    parent.insert(offset, anchor)

        index = 0
        while index < len(parent):
            child = parent[index]
            index += 1
            if child.tag not in _SKIP_TAGS:
                self._walk(child)
            if not child.tail or isinstance(child.tail, AtomicString):
                continue
            pieces = BARE_URL_RE.split(child.tail)
            if len(pieces) == 1:
                continue
            child.tail = pieces[0]
            for anchor in self._anchors(pieces):
                parent.insert(index, anchor)
                index += 1


class BareUrlExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # after inline patterns (20), before attr_list (8)
        md.treeprocessors.register(BareUrlTreeprocessor(md), "bare_url", 15)


# ---------------------------------------------------------------------------
# Image sizing
# ---------------------------------------------------------------------------


class ImageSizePreprocessor(Preprocessor):
    """Rewrite ``![alt](src =WxH)`` into attribute-list syntax."""

    def run(self, lines: list[str]) -> list[str]:
        return [IMAGE_SIZE_RE.sub(self._replace, line) for line in lines]

    @staticmethod
    def _replace(match: re.Match[str]) -> str:
        attributes = []
        if match.group("width"):
            attributes.append(f"width={match.group('width')}")
        if match.group("height"):
            attributes.append(f"height={match.group('height')}")
        image = f"![{match.group('alt')}]({match.group('src')}{match.group('title') or ''})"
        if not attributes:
            return image
        return image + "{: " + " ".join(attributes) + "}"


class ImageAutofillTreeprocessor(Treeprocessor):
    """Fill in ``width``/``height`` for local images that carry neither."""

    def __init__(self, md: markdown.Markdown, base_dir: Path) -> None:
        super().__init__(md)
        self.base_dir = base_dir

    def run(self, root: etree.Element) -> None:
        for image in root.iter("img"):
            if image.get("width") or image.get("height"):
                continue
            size = self._measure(image.get("src", ""))
            if size is not None:
                image.set("width", str(size[0]))
                image.set("height", str(size[1]))

    def _measure(self, src: str) -> tuple[int, int] | None:
        if not src or "://" in src or src.startswith(("data:", "//", "/")):
            return None
        path = self.base_dir / unquote(src.split("#", 1)[0].split("?", 1)[0])
        if not path.is_file():
            return None
        try:
            with Image.open(path) as image:
                return image.size
        except (OSError, Image.DecompressionBombError):
            return None


class ImageSizeExtension(Extension):
    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "base_dir": [".", "Directory that relative image sources resolve against"],
            "autofill": [True, "Read missing image dimensions from disk"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # fenced_code stashes code blocks at 25, so sizes inside them are left alone
        md.preprocessors.register(ImageSizePreprocessor(md), "image_size", 20)
        if self.getConfig("autofill"):
            md.treeprocessors.register(
                ImageAutofillTreeprocessor(md, Path(self.getConfig("base_dir"))),
                "image_autofill",
                5,
            )


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class MarkdownRenderer:
    """Renders markdown documents to HTML fragments.

    A fresh ``markdown.Markdown`` instance is built for every call, so one
    renderer can be shared across concurrently read documents.
    """

    def __init__(self, autofill: bool = True) -> None:
        self.autofill = autofill

    def render(self, text: str, base_dir: str | Path = ".") -> str:
        """Render *text*; relative image paths resolve against *base_dir*."""
        md = markdown.Markdown(
            extensions=[
                "fenced_code",
                "codehilite",
                "smarty",
                "tables",
                "attr_list",
                BareUrlExtension(),
                ImageSizeExtension(base_dir=str(base_dir), autofill=self.autofill),
            ],
            extension_configs={
                "codehilite": {
                    "css_class": "highlight",
                    "guess_lang": False,
                    "use_pygments": True,
                }
            },
            output_format="html",
        )
        return md.convert(text)
