"""Bundle emission and static asset probing."""

from docbundler.emitter.assets import asset_key, collect_assets, probe_asset, probe_file
from docbundler.emitter.emitter import EmitReport, emit_module

__all__ = [
    "EmitReport",
    "asset_key",
    "collect_assets",
    "emit_module",
    "probe_asset",
    "probe_file",
]
