"""docbundler run orchestrator.

Drives one complete run:

1. Print the banner and the active configuration.
2. Ask for confirmation (unless ``--confirm`` was given).
3. Make sure the target directory exists, crawl, and wait for every module
   to be emitted.
4. Optionally keep watching the root directory and re-run on changes.

Usage::

    docbundler --dir ./content --confirm
    python -m docbundler --dir ./content --target ./public/docs --watch
"""

from __future__ import annotations

import asyncio
import os
import sys
import time
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from rich.prompt import Confirm
from watchfiles import Change, awatch

from docbundler import __version__
from docbundler.config import Config
from docbundler.content.renderer import MarkdownRenderer
from docbundler.crawler import crawl
from docbundler.emitter.emitter import EmitReport
from docbundler.utils import (
    console,
    ensure_dir,
    format_duration,
    print_banner,
    print_error,
    print_info,
    print_line,
    print_success,
    print_summary_table,
    print_warning,
    run_blocking,
)

WATCHED_SUFFIXES = (".md", ".json")


class RunSummary(BaseModel):
    """Result of a single crawl-and-emit run."""

    emitted: list[EmitReport] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list, description="Modules that could not be explored or emitted")
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def success(self) -> bool:
        return not self.failed


class Pipeline:
    """Runs the crawl for one configuration, once or in watch mode.

    Attributes:
        config: Immutable run configuration.
        confirmed: Whether the user has agreed to write output.  Set once a
            prompt is answered positively so re-runs do not ask again.
        renderer: Markdown renderer shared by every run.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.confirmed = config.confirm
        self.renderer = MarkdownRenderer()

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    async def confirm(self) -> bool:
        """Ask the user whether to continue, unless already confirmed."""
        if self.confirmed:
            return True
        answer = await run_blocking(Confirm.ask, "continue", default=False, console=console)
        print_line()
        self.confirmed = bool(answer)
        return self.confirmed

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    async def run_once(self) -> RunSummary:
        """Crawl the root directory and wait for every module's bundles.

        Raises:
            OSError: If the target directory cannot be created or the root
                directory cannot be listed.
        """
        start = time.monotonic()
        ensure_dir(self.config.target_path)

        result = await crawl(self.config, self.renderer)
        summary = RunSummary(failed=sorted(result.failures))

        modules = list(result.emissions)
        outcomes = await asyncio.gather(*result.emissions.values(), return_exceptions=True)
        for module, outcome in zip(modules, outcomes):
            if isinstance(outcome, Exception):
                print_error(f"failed to emit {module}: {outcome}")
                summary.failed.append(module)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                summary.emitted.append(outcome)

        summary.duration_seconds = time.monotonic() - start
        self._print_summary(summary)
        return summary

    async def run_safely(self) -> RunSummary | None:
        """Run once, logging instead of raising on failure."""
        try:
            return await self.run_once()
        except Exception as exc:  # noqa: BLE001 - top-level run boundary
            print_error(f"run failed: {exc}")
            return None

    async def run(self) -> bool:
        """Execute a full run (and watch loop, if enabled).

        Returns:
            ``True`` when the last run emitted every module without error, or
            when the user declined to run.
        """
        print_banner("docbundler", f"version {__version__}")
        print_summary_table(self.config.describe(), title="Options")

        if not await self.confirm():
            print_warning("aborted, nothing written")
            return True

        summary = await self.run_safely()

        if self.config.watch:
            await self.watch()

        return summary is not None and summary.success

    # ------------------------------------------------------------------
    # Watch mode
    # ------------------------------------------------------------------

    def should_rebuild(self, change: Change, path: str) -> bool:
        """Filter for file-system events that warrant a new run."""
        location = Path(path)
        if location.suffix.lower() not in WATCHED_SUFFIXES:
            return False

        for output in (self.config.target_path, self.config.static_path):
            if _is_within(location, output):
                return False

        try:
            parts = location.resolve().relative_to(self.config.directory.resolve()).parts
        except ValueError:
            parts = (location.name,)
        return not any(self.config.is_excluded(part) for part in parts)

    async def watch(self) -> None:
        """Re-run the crawl whenever a watched file changes."""
        print_info(f"will watch {self.config.directory} for changes")
        async for changes in awatch(
            self.config.directory, watch_filter=self.should_rebuild, recursive=True
        ):
            print_line(2)
            for _, path in sorted(changes):
                print_info(f"{path} modified, remaking")
            await self.run_safely()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _print_summary(self, summary: RunSummary) -> None:
        print_line()
        data = {
            "Modules emitted": str(len(summary.emitted)),
            "Sections": str(sum(report.sections for report in summary.emitted)),
            "Assets": str(sum(report.assets for report in summary.emitted)),
            "Duration": format_duration(summary.duration_seconds),
        }
        if summary.failed:
            data["Failed"] = ", ".join(summary.failed)
        print_summary_table(data, title="Run Summary")
        if summary.success:
            print_success(f"{len(summary.emitted)} module(s) written to {self.config.target_path}")


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.resolve().relative_to(directory.resolve())
    except ValueError:
        return False
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser():
    """Create the command-line parser."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="docbundler",
        description="Build per-module JSON documentation bundles from markdown trees",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  docbundler --dir ./content --confirm\n"
            "  docbundler --dir ./content --target ./public/docs --watch\n"
        ),
    )
    parser.add_argument("--dir", dest="directory", default=None, help="Root content directory (default: cwd)")
    parser.add_argument("--target", default=None, help="Output directory for bundles (default: <dir>/docs)")
    parser.add_argument("--static", default=None, help="Output directory for assets (default: <dir>/static)")
    parser.add_argument(
        "--exclude",
        default=None,
        help="Regex matched against basenames to skip (default: node_modules|^[.])",
    )
    parser.add_argument(
        "--confirm", action="store_true", default=None, help="Do not ask before writing output"
    )
    parser.add_argument(
        "--watch", action="store_true", default=None, help="Re-run whenever .md/.json files change"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``docbundler`` and ``python -m docbundler``."""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_env(
            directory=Path(args.directory) if args.directory else None,
            target=Path(args.target) if args.target else None,
            static=Path(args.static) if args.static else None,
            exclude=args.exclude,
            confirm=args.confirm,
            watch=args.watch,
        )
    except ValidationError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(2)

    if not os.path.isdir(config.directory):
        print_error(f"Content directory not found: {config.directory}")
        sys.exit(1)

    pipeline = Pipeline(config)
    try:
        ok = asyncio.run(pipeline.run())
    except KeyboardInterrupt:
        print_line()
        ok = True

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
