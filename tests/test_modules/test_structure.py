"""Unit tests for manifest parsing (docbundler.modules.structure)."""

from __future__ import annotations

import pytest

from docbundler.errors import ManifestError
from docbundler.modules.structure import (
    StructureLeaf,
    StructureNode,
    parse_entry,
    parse_manifest,
)


class TestParseEntry:
    @pytest.mark.unit
    def test_string_is_leaf(self):
        assert parse_entry("intro") == StructureLeaf("intro")

    @pytest.mark.unit
    def test_array_is_node(self):
        assert parse_entry(["advanced", "tips", ["faq", "billing"]]) == StructureNode(
            "advanced",
            (StructureLeaf("tips"), StructureNode("faq", (StructureLeaf("billing"),))),
        )

    @pytest.mark.unit
    def test_single_element_array_is_childless_node(self):
        assert parse_entry(["intro"]) == StructureNode("intro", ())

    @pytest.mark.unit
    def test_empty_array_is_nothing(self):
        assert parse_entry([]) is None

    @pytest.mark.unit
    def test_nested_empty_arrays_are_dropped(self):
        assert parse_entry(["intro", [], "tips"]) == StructureNode("intro", (StructureLeaf("tips"),))

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [1, None, {"key": "intro"}, True])
    def test_invalid_values(self, value):
        with pytest.raises(ManifestError):
            parse_entry(value, "guide")

    @pytest.mark.unit
    def test_array_head_must_be_key(self):
        with pytest.raises(ManifestError, match="guide"):
            parse_entry([["intro"], "tips"], "guide")


class TestParseManifest:
    @pytest.mark.unit
    def test_array_of_entries(self):
        assert parse_manifest(["intro", ["advanced", "tips"]]) == [
            StructureLeaf("intro"),
            StructureNode("advanced", (StructureLeaf("tips"),)),
        ]

    @pytest.mark.unit
    def test_bare_string(self):
        assert parse_manifest("intro") == [StructureLeaf("intro")]

    @pytest.mark.unit
    def test_empty_entries_kept_as_none(self):
        assert parse_manifest([[], "intro"]) == [None, StructureLeaf("intro")]

    @pytest.mark.unit
    def test_object_rejected(self):
        with pytest.raises(ManifestError, match="top level"):
            parse_manifest({"intro": []}, "guide")
