"""Crawler: discovers modules under the root directory and schedules emission.

Every immediate sub-directory of the root is explored concurrently.  A module
whose exploration raises is reported and skipped without affecting its
siblings.  Emission of each surviving module is started as its own task and
*not* awaited here; callers that need completion await
``CrawlResult.emissions``.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field

from docbundler.config import Config
from docbundler.content.renderer import MarkdownRenderer
from docbundler.emitter.emitter import EmitReport, emit_module
from docbundler.modules.explorer import ModuleResult, explore_module
from docbundler.modules.guard import traverse
from docbundler.utils import list_dir, print_error, print_line


@dataclass
class CrawlResult:
    """Outcome of module discovery."""

    emissions: dict[str, asyncio.Task[EmitReport]] = field(default_factory=dict)
    failures: dict[str, BaseException] = field(default_factory=dict)


async def crawl(config: Config, renderer: MarkdownRenderer | None = None) -> CrawlResult:
    """Explore every module of ``config.directory`` and start emitting them.

    Args:
        config: Run configuration.
        renderer: Markdown renderer; a default one is created if omitted.

    Returns:
        A ``CrawlResult`` with one pending emission task per module.
    """
    renderer = renderer or MarkdownRenderer()
    root = os.fspath(config.directory)
    modules = await list_dir(root)

    async def explore(location: str) -> ModuleResult | None:
        return await explore_module(location, config, renderer)

    results = await asyncio.gather(
        *(traverse(os.path.join(root, module), explore, config) for module in modules),
        return_exceptions=True,
    )

    print_line()

    crawl_result = CrawlResult()
    for module, result in zip(modules, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            print_error(f"failed to explore {module}: {result}")
            crawl_result.failures[module] = result
        elif result is not None:
            crawl_result.emissions[module] = asyncio.create_task(
                emit_module(result, config), name=f"emit:{module}"
            )
    return crawl_result
