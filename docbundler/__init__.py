"""docbundler: markdown documentation trees to per-module JSON bundles."""

__version__ = "0.1.0"
