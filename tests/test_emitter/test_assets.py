"""Unit tests for static asset probing (docbundler.emitter.assets)."""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import patch

import pytest
from PIL import Image

from docbundler.content.models import AssetMeta, ImageSize
from docbundler.emitter.assets import (
    FALLBACK_MIME,
    asset_key,
    collect_assets,
    probe_asset,
    probe_file,
)


class TestAssetKey:
    @pytest.mark.unit
    def test_lower_cased_relative_key(self):
        assert asset_key("/content/guide/basics/Media", "Logo.PNG") == "media/logo.png"

    @pytest.mark.unit
    def test_trailing_separator(self):
        assert asset_key("/content/media/", "a.svg") == "media/a.svg"


class TestProbeFile:
    @pytest.mark.unit
    def test_png(self, tmp_path: Path, png_factory: Callable[..., Path]):
        path = png_factory(tmp_path / "logo.png", size=(5, 7))
        assert probe_file(path) == ("image/png", ImageSize(width=5, height=7))

    @pytest.mark.unit
    def test_misnamed_image_uses_content(self, tmp_path: Path, png_factory: Callable[..., Path]):
        path = png_factory(tmp_path / "logo.bin")
        mime, size = probe_file(path)
        assert mime == "image/png"
        assert size == ImageSize(width=4, height=3)

    @pytest.mark.unit
    def test_text_file(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert probe_file(path) == ("text/plain", None)

    @pytest.mark.unit
    def test_unknown_file(self, tmp_path: Path):
        path = tmp_path / "blob.zzunknownext"
        path.write_bytes(b"\x00\x01\x02")
        assert probe_file(path) == (FALLBACK_MIME, None)

    @pytest.mark.unit
    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(OSError):
            probe_file(tmp_path / "missing.png")

    @pytest.mark.unit
    def test_oversized_image_raises(
        self, tmp_path: Path, png_factory: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ):
        path = png_factory(tmp_path / "huge.png", size=(4, 3))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 5)
        with pytest.raises(Image.DecompressionBombError):
            probe_file(path)


class TestProbeAsset:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self, tmp_path: Path, png_factory: Callable[..., Path]):
        png_factory(tmp_path / "media" / "Shot.png")
        meta = await probe_asset(tmp_path / "media", "Shot.png")
        assert meta == AssetMeta(key="media/shot.png", type="image/png", size=ImageSize(width=4, height=3))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_error_gives_placeholder(self, tmp_path: Path):
        with patch("docbundler.emitter.assets.probe_file", side_effect=PermissionError("denied")), \
                patch("docbundler.emitter.assets.print_error") as error:
            meta = await probe_asset(tmp_path / "media", "locked.png")

        assert meta == AssetMeta(key="media/locked.png", type="", size=None)
        error.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_oversized_image_gives_placeholder(
        self, tmp_path: Path, png_factory: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ):
        png_factory(tmp_path / "media" / "huge.png", size=(4, 3))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 5)

        with patch("docbundler.emitter.assets.print_error") as error:
            meta = await probe_asset(tmp_path / "media", "huge.png")

        assert meta == AssetMeta(key="media/huge.png", type="", size=None)
        error.assert_called_once()


class TestCollectAssets:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_collects_files_across_directories(self, tmp_path: Path, png_factory: Callable[..., Path]):
        media = tmp_path / "media"
        png_factory(media / "b.png")
        (media / "a.txt").write_text("a")
        (media / "nested").mkdir()
        icons = tmp_path / "icons"
        png_factory(icons / "star.png", size=(2, 2))

        meta = await collect_assets([str(media), str(icons)])

        assert list(meta) == ["icons/star.png", "media/a.txt", "media/b.png"]
        assert meta["media/a.txt"].size is None
        assert meta["icons/star.png"].size == ImageSize(width=2, height=2)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_oversized_image_does_not_abort_batch(
        self, tmp_path: Path, png_factory: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ):
        media = tmp_path / "media"
        png_factory(media / "huge.png", size=(4, 3))
        (media / "notes.txt").write_text("notes")
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 5)

        with patch("docbundler.emitter.assets.print_error"):
            meta = await collect_assets([str(media)])

        assert meta["media/huge.png"] == AssetMeta(key="media/huge.png")
        assert meta["media/notes.txt"].type == "text/plain"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_directories(self):
        assert await collect_assets([]) == {}
