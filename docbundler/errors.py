"""Exceptions raised by docbundler."""

from __future__ import annotations


class DocBundlerError(Exception):
    """Base class for docbundler errors."""


class ManifestError(DocBundlerError):
    """Raised when a module's ``structure.json`` cannot be used."""

    def __init__(self, module: str, message: str) -> None:
        self.module = module
        super().__init__(f"Invalid structure.json in {module}: {message}")
