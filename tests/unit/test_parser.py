"""Tests for the position-tracking YAML loader and its source map."""

from __future__ import annotations

from pathlib import Path

from swagcheck.parser.loader import SourceMap, TrackedLoader, to_pointer
from tests.conftest import INVALID_DOCUMENT_YAML, VALID_DOCUMENT_YAML


class TestTrackedLoader:
    def test_load_string(self, loader: TrackedLoader) -> None:
        raw, source_map = loader.load_string(VALID_DOCUMENT_YAML)
        assert raw["swagger"] == "2.0"
        assert raw["info"]["title"] == "Pets"
        assert raw["paths"]["/pets"]["get"]["parameters"][0]["in"] == "query"

    def test_load_string_empty(self, loader: TrackedLoader) -> None:
        raw, source_map = loader.load_string("")
        assert raw == {}
        assert source_map.line_of("/anything") is None

    def test_plain_types(self, loader: TrackedLoader) -> None:
        raw, _ = loader.load_string(VALID_DOCUMENT_YAML)
        assert type(raw) is dict
        assert type(raw["swagger"]) is str
        assert type(raw["paths"]["/pets"]["get"]["parameters"]) is list

    def test_load_json(self, loader: TrackedLoader) -> None:
        raw, source_map = loader.load_string('{"swagger": "2.0",\n "info": {"title": "x"}}')
        assert raw == {"swagger": "2.0", "info": {"title": "x"}}
        assert source_map.line_of("/info") == 2

    def test_load_file(self, loader: TrackedLoader, tmp_path: Path) -> None:
        path = tmp_path / "api.yaml"
        path.write_text(VALID_DOCUMENT_YAML, encoding="utf-8")
        raw, source_map = loader.load(path)
        assert "paths" in raw
        span = source_map.get("/paths")
        assert span is not None
        assert span.file == str(path)


class TestSourceMapPositions:
    def test_key_lines(self, loader: TrackedLoader) -> None:
        _, source_map = loader.load_string(INVALID_DOCUMENT_YAML)
        assert source_map.line_of("") == 1
        assert source_map.line_of("/swagger") == 1
        assert source_map.line_of("/info") == 2
        assert source_map.line_of("/info/title") == 3
        assert source_map.line_of("/extra") == 11

    def test_escaped_keys(self, loader: TrackedLoader) -> None:
        _, source_map = loader.load_string(INVALID_DOCUMENT_YAML)
        assert source_map.line_of("/paths/~1pets") == 5
        assert source_map.line_of("/paths/~1pets/get") == 6

    def test_sequence_items(self, loader: TrackedLoader) -> None:
        _, source_map = loader.load_string(INVALID_DOCUMENT_YAML)
        assert source_map.line_of("/paths/~1pets/get/parameters/0") == 8
        assert source_map.line_of("/paths/~1pets/get/parameters/0/in") == 9

    def test_columns_are_one_based(self, loader: TrackedLoader) -> None:
        _, source_map = loader.load_string(INVALID_DOCUMENT_YAML)
        span = source_map.get("/info/title")
        assert span is not None
        assert span.column == 3


class TestSourceMapLookup:
    def test_unknown_pointer_falls_back_to_ancestor(self, loader: TrackedLoader) -> None:
        _, source_map = loader.load_string(INVALID_DOCUMENT_YAML)
        assert source_map.line_of("/info/version") == 2

    def test_empty_map_is_unknown(self) -> None:
        assert SourceMap().line_of("/anything") is None
        assert SourceMap().line_of("") is None


class TestToPointer:
    def test_root(self) -> None:
        assert to_pointer([]) == ""

    def test_escaping(self) -> None:
        assert to_pointer(["paths", "/pets/{id}", "get"]) == "/paths/~1pets~1{id}/get"
        assert to_pointer(["a~b", 0]) == "/a~0b/0"
