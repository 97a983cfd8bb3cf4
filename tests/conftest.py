"""Shared test fixtures for swagcheck."""

from __future__ import annotations

from typing import Any

import pytest

from swagcheck.parser.loader import TrackedLoader
from swagcheck.service.document_validator import DocumentValidator
from swagcheck.validation.processor import ErrorProcessor

# A trimmed Swagger 2.0 style schema: inline (no $ref) so schema pointers
# are predictable.
SAMPLE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["swagger", "info", "paths"],
    "additionalProperties": False,
    "properties": {
        "swagger": {"enum": ["2.0"]},
        "info": {
            "type": "object",
            "required": ["title", "version"],
            "properties": {
                "title": {"type": "string"},
                "version": {"type": "string"},
            },
        },
        "paths": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "get": {
                        "type": "object",
                        "required": ["responses"],
                        "properties": {
                            "parameters": {
                                "type": "array",
                                "items": {
                                    "oneOf": [
                                        {
                                            "type": "object",
                                            "required": ["name", "in", "schema"],
                                            "properties": {"in": {"enum": ["body"]}},
                                        },
                                        {
                                            "type": "object",
                                            "required": ["name", "in", "type"],
                                            "properties": {"in": {"enum": ["query"]}},
                                        },
                                    ]
                                },
                            },
                            "responses": {"type": "object"},
                        },
                    }
                },
            },
        },
    },
}

VALID_DOCUMENT_YAML = """\
swagger: "2.0"
info:
  title: Pets
  version: "1.0"
paths:
  /pets:
    get:
      parameters:
        - name: limit
          in: query
          type: integer
      responses: {}
"""

# Line numbers referenced by the tests are noted on the right.
INVALID_DOCUMENT_YAML = """\
swagger: "3.0"
info:
  title: Pets
paths:
  /pets:
    get:
      parameters:
        - name: limit
          in: query
      responses: {}
extra: true
"""
# line 1: swagger enum; line 2: info missing version; line 8: oneOf parameter


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def processor() -> ErrorProcessor:
    return ErrorProcessor()


@pytest.fixture
def document_validator() -> DocumentValidator:
    return DocumentValidator(SAMPLE_SCHEMA)


def leaf(
    message: str = "boom",
    *,
    keyword: str = "frobnicate",
    level: str = "error",
    pointer: str = "",
    **payload: Any,
) -> dict[str, Any]:
    """Build a raw leaf diagnostic in the validator report shape."""
    return {
        "level": level,
        "keyword": keyword,
        "message": message,
        "instance": {"pointer": pointer},
        **payload,
    }


def combinator(reports: dict[str, Any], *, pointer: str = "", level: str = "error") -> dict[str, Any]:
    """Build a raw oneOf diagnostic with one sub-report per alternative."""
    return {
        "level": level,
        "keyword": "oneOf",
        "message": "instance failed to match exactly one schema",
        "instance": {"pointer": pointer},
        "nrSchemas": len(reports),
        "reports": reports,
    }
