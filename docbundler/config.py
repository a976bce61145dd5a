"""docbundler configuration.

A single immutable, typed configuration value for the whole run.  It is
constructed once (from the command line, the environment, or a saved JSON
file) and passed explicitly into every stage of the crawl.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_EXCLUDE = r"node_modules|^[.]"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Run parameters shared by the crawler, resolvers and emitter.

    ``target`` and ``static`` default to ``docs`` and ``static`` inside
    ``directory`` when they are not given.
    """

    model_config = ConfigDict(frozen=True)

    directory: Path = Field(default_factory=Path.cwd, description="Root content directory")
    target: Path = Field(description="Output directory for JSON bundles")
    static: Path = Field(description="Output directory for copied asset directories")
    exclude: re.Pattern[str] = Field(
        default=re.compile(DEFAULT_EXCLUDE),
        description="Regex searched in a path's basename to decide whether to skip it",
    )
    confirm: bool = Field(default=False, description="Skip the interactive confirmation prompt")
    watch: bool = Field(default=False, description="Re-run the crawl whenever sources change")

    @model_validator(mode="before")
    @classmethod
    def _derive_output_paths(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = dict(data)
        directory = Path(values.get("directory") or Path.cwd())
        values["directory"] = directory
        if not values.get("target"):
            values["target"] = directory / "docs"
        if not values.get("static"):
            values["static"] = directory / "static"
        return values

    # ------------------------------------------------------------------
    # Derived helpers
    # ------------------------------------------------------------------

    @property
    def target_path(self) -> Path:
        """Output directory for bundles."""
        return self.target

    @property
    def static_path(self) -> Path:
        """Output directory for asset copies."""
        return self.static

    def is_excluded(self, location: str | Path) -> bool:
        """Return ``True`` if the basename of *location* matches ``exclude``."""
        return self.exclude.search(os.path.basename(os.fspath(location))) is not None

    def describe(self) -> dict[str, str]:
        """Return the settings as display strings for the start-up table."""
        return {
            "directory": str(self.directory),
            "target": str(self.target_path),
            "static": str(self.static_path),
            "exclude": self.exclude.pattern,
            "confirm": str(self.confirm).lower(),
            "watch": str(self.watch).lower(),
        }

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            DOCBUNDLER_DIR, DOCBUNDLER_TARGET, DOCBUNDLER_STATIC,
            DOCBUNDLER_EXCLUDE, DOCBUNDLER_CONFIRM, DOCBUNDLER_WATCH.

        Keyword arguments whose value is not ``None`` take precedence over
        the environment, which is how the command line is layered on top.
        """
        values: dict[str, Any] = {}
        if os.environ.get("DOCBUNDLER_DIR"):
            values["directory"] = Path(os.environ["DOCBUNDLER_DIR"])
        if os.environ.get("DOCBUNDLER_TARGET"):
            values["target"] = Path(os.environ["DOCBUNDLER_TARGET"])
        if os.environ.get("DOCBUNDLER_STATIC"):
            values["static"] = Path(os.environ["DOCBUNDLER_STATIC"])
        if os.environ.get("DOCBUNDLER_EXCLUDE"):
            values["exclude"] = os.environ["DOCBUNDLER_EXCLUDE"]
        if os.environ.get("DOCBUNDLER_CONFIRM"):
            values["confirm"] = os.environ["DOCBUNDLER_CONFIRM"].strip().lower() in _TRUTHY
        if os.environ.get("DOCBUNDLER_WATCH"):
            values["watch"] = os.environ["DOCBUNDLER_WATCH"].strip().lower() in _TRUTHY

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
