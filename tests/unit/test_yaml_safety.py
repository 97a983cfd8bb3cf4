"""Tests for YAML parsing DoS safeguards in TrackedLoader."""

from __future__ import annotations

import pytest

from swagcheck.models.errors import Severity
from swagcheck.parser.loader import _MAX_DOCUMENT_SIZE, TrackedLoader, YAMLSafetyError
from swagcheck.service.document_validator import DocumentValidator
from tests.conftest import VALID_DOCUMENT_YAML


class TestAnchorRejection:
    """Anchors/aliases are rejected entirely."""

    def test_billion_laughs_rejected(self, loader: TrackedLoader) -> None:
        """Classic billion-laughs payload with recursive anchor expansion."""
        yaml = (
            "a: &a ['lol','lol','lol','lol','lol']\n"
            "b: &b [*a,*a,*a,*a,*a]\n"
            "c: &c [*b,*b,*b,*b,*b]\n"
            "d: &d [*c,*c,*c,*c,*c]\n"
        )
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_anchor_in_sequence(self, loader: TrackedLoader) -> None:
        yaml = "items:\n  - &item1 foo\n  - *item1\n"
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_ampersand_in_comment_not_rejected(self, loader: TrackedLoader) -> None:
        """An & inside a YAML comment must not trigger a false positive."""
        yaml = "# see R&D notes\nkey: value\n"
        raw, _ = loader.load_string(yaml)
        assert raw["key"] == "value"


class TestDocumentSize:
    def test_oversized_document_rejected(self, loader: TrackedLoader) -> None:
        yaml = "key: " + "x" * (_MAX_DOCUMENT_SIZE + 1) + "\n"
        with pytest.raises(YAMLSafetyError, match="maximum size"):
            loader.load_string(yaml)

    def test_configured_limit(self) -> None:
        loader = TrackedLoader(max_document_size=10)
        with pytest.raises(YAMLSafetyError, match="maximum size"):
            loader.load_string("key: a longer value\n")


class TestShapeLimits:
    def test_excessive_node_count_rejected(self) -> None:
        loader = TrackedLoader(max_node_count=100)
        yaml = "\n".join(f"k{i}: v{i}" for i in range(101))
        with pytest.raises(YAMLSafetyError, match="node count"):
            loader.load_string(yaml)

    def test_deep_nesting_rejected(self) -> None:
        loader = TrackedLoader(max_depth=20)
        yaml = ""
        for i in range(25):
            yaml += "  " * i + f"level{i}:\n"
        yaml += "  " * 25 + "value: deep\n"
        with pytest.raises(YAMLSafetyError, match="nesting depth"):
            loader.load_string(yaml)

    def test_parser_recursion_rejected(self, loader: TrackedLoader) -> None:
        with pytest.raises(YAMLSafetyError, match="nesting depth"):
            loader.load_string("a: " + "[" * 3000 + "]" * 3000)


class TestValidDocuments:
    def test_valid_document_passes(self, loader: TrackedLoader) -> None:
        raw, source_map = loader.load_string(VALID_DOCUMENT_YAML)
        assert "paths" in raw
        assert source_map.line_of("/paths") == 5


class TestDocumentValidatorIntegration:
    """YAMLSafetyError surfaces as a single error record with unknown line."""

    def test_anchor_returns_error_record(self, document_validator: DocumentValidator) -> None:
        summary = document_validator.validate_string("a: &a [1,2,3]\nb: *a\n")
        assert summary.valid is False
        (record,) = summary.errors
        assert record.severity is Severity.ERROR
        assert record.line is None
        assert "anchors/aliases" in record.message

    def test_deeply_nested_flow_collections_return_error_record(
        self, document_validator: DocumentValidator
    ) -> None:
        summary = document_validator.validate_string("a: " + "[" * 3000 + "]" * 3000)
        (record,) = summary.errors
        assert record.line is None
        assert "nesting depth" in record.message
