"""Pydantic v2 models for documents, tree nodes and asset metadata.

These are the records that flow from the markdown reader through the module
explorer and tree builder into the emitted bundles.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class Document(BaseModel):
    """One rendered markdown file."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Filename stem, e.g. 'getting-started'")
    title: str = Field(..., description="TITLE directive payload or a title derived from the id")
    about: str = Field(default="", description="ABOUT directive payload")
    content: str = Field(default="", description="Rendered HTML, trimmed")


class TreeNode(BaseModel):
    """A document placed in a module's tree, with its ordered children."""

    id: str
    title: str
    about: str = ""
    content: str = ""
    children: list["TreeNode"] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document, children: list["TreeNode"] | None = None) -> "TreeNode":
        """Copy *document* into a fresh node so no two positions share children."""
        return cls(**document.model_dump(), children=list(children or []))


# A mapping value is a rendered document or, for nested directories inside a
# content directory, the raw path of a not-yet-processed asset directory.
MappingValue = Union[Document, str]
Mapping = dict[str, MappingValue]


# ---------------------------------------------------------------------------
# Asset metadata
# ---------------------------------------------------------------------------


class ImageSize(BaseModel):
    """Pixel dimensions of an image asset."""

    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class AssetMeta(BaseModel):
    """Probe result for one static asset."""

    key: str = Field(..., description="Lower-cased '<asset dir>/<file>' path")
    type: str = Field(default="", description="MIME type, empty when probing failed")
    size: Optional[ImageSize] = Field(default=None, description="Only set for images")
