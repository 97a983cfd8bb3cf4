"""JSON Schema validation producing raw diagnostics for :class:`ErrorProcessor`.

``jsonschema`` errors are converted into plain mappings carrying the
keyword-specific payload fields (``found``/``expected``, ``value``/``enum``,
``missing``, ``unwanted``) and, for ``oneOf``/``anyOf`` failures, one
sub-report per alternative schema under ``reports``.
"""

from __future__ import annotations

import json
import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Any

import referencing.exceptions
from jsonschema import Draft4Validator
from jsonschema.exceptions import ValidationError
from jsonschema.validators import validator_for
from ruamel.yaml import YAML

from swagcheck.parser.loader import to_pointer

logger = logging.getLogger("swagcheck.validation")

_COMBINATORS = ("oneOf", "anyOf")


class SchemaEvaluationError(ValueError):
    """Raised when a schema that passed its meta-schema check cannot be applied.

    Typical causes are an unresolvable ``$ref`` or an invalid regular
    expression in ``pattern``/``patternProperties``.
    """


def load_schema(path: Path) -> dict[str, Any]:
    """Read a JSON Schema from a ``.json`` file or any YAML file."""
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            schema = json.load(handle)
        else:
            schema = YAML(typ="safe").load(handle)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema file {path} must contain a JSON object")
    return schema


def json_type(value: Any) -> str:
    """Return the JSON Schema primitive type name of a Python value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list | tuple):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class SchemaValidator:
    """Validates documents against a JSON Schema (Draft 4 unless ``$schema`` says otherwise)."""

    def __init__(self, schema: dict[str, Any]) -> None:
        validator_cls = validator_for(schema, default=Draft4Validator)
        validator_cls.check_schema(schema)
        self._validator = validator_cls(schema)

    def validate(self, document: Any) -> list[dict[str, Any]]:
        """Return one raw diagnostic per top-level validation error."""
        try:
            errors = sorted(
                self._validator.iter_errors(document),
                key=lambda e: [str(p) for p in e.absolute_path],
            )
            logger.debug("Schema validation produced %d error(s)", len(errors))
            return [self._to_diagnostic(error) for error in errors]
        except referencing.exceptions.Unresolvable as exc:
            raise SchemaEvaluationError(f"unresolvable reference: {exc}") from exc
        except re.error as exc:
            raise SchemaEvaluationError(f"invalid regular expression: {exc}") from exc

    def _to_diagnostic(self, error: ValidationError) -> dict[str, Any]:
        schema_path = list(error.absolute_schema_path)
        diagnostic: dict[str, Any] = {
            "level": "error",
            "keyword": error.validator,
            "message": error.message,
            "instance": {"pointer": to_pointer(error.absolute_path)},
            "schema": {"pointer": to_pointer(schema_path[:-1])},
        }
        match error.validator:
            case "type":
                expected = error.validator_value
                diagnostic["found"] = json_type(error.instance)
                diagnostic["expected"] = (
                    sorted(expected) if isinstance(expected, list) else [expected]
                )
            case "enum":
                diagnostic["value"] = error.instance
                diagnostic["enum"] = list(error.validator_value)
            case "required" if isinstance(error.instance, dict):
                diagnostic["missing"] = sorted(
                    name for name in error.validator_value if name not in error.instance
                )
            case "additionalProperties" if isinstance(error.instance, dict):
                diagnostic["unwanted"] = _unwanted_properties(error.instance, error.schema)
            case keyword if keyword in _COMBINATORS:
                diagnostic.update(self._combinator_reports(error, schema_path))
        return diagnostic

    def _combinator_reports(
        self, error: ValidationError, schema_path: list[Any]
    ) -> dict[str, Any]:
        by_alternative: dict[int, list[ValidationError]] = defaultdict(list)
        for sub_error in error.context or ():
            if sub_error.relative_schema_path:
                by_alternative[sub_error.relative_schema_path[0]].append(sub_error)
        count = len(error.validator_value)
        reports = {
            to_pointer([*schema_path, index]): [
                self._to_diagnostic(sub_error) for sub_error in by_alternative.get(index, [])
            ]
            for index in range(count)
        }
        return {"nrSchemas": count, "reports": reports}


def _unwanted_properties(instance: dict[str, Any], schema: Any) -> list[str]:
    if not isinstance(schema, dict):
        return sorted(instance)
    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return sorted(
        name
        for name in instance
        if name not in properties and not any(re.search(pattern, name) for pattern in patterns)
    )
