"""Document validation service: load YAML, validate against a schema, normalize errors.

Reusable by the CLI and the REST API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml.error import MarkedYAMLError, YAMLError

from swagcheck.models.errors import (
    ErrorRecord,
    MultiAlternativeErrorRecord,
    Severity,
    sort_records,
)
from swagcheck.parser.loader import TrackedLoader, YAMLSafetyError
from swagcheck.validation.messages import MessageCatalog, MessageRewriter
from swagcheck.validation.processor import ErrorProcessor
from swagcheck.validation.schema import SchemaValidator

logger = logging.getLogger("swagcheck.service")

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class ValidationSummary:
    """Result of validating one document."""

    errors: frozenset[ErrorRecord] = field(default_factory=frozenset)

    @property
    def valid(self) -> bool:
        return not any(e.severity is Severity.ERROR for e in self.errors)

    def sorted_errors(self) -> list[ErrorRecord]:
        return sort_records(self.errors)


# ---------------------------------------------------------------------------
# DocumentValidator
# ---------------------------------------------------------------------------


class DocumentValidator:
    """Validates YAML/JSON documents against one JSON Schema.

    Stateless between calls; one instance may serve concurrent requests.
    """

    def __init__(
        self,
        schema: dict[str, Any],
        catalog: MessageCatalog | None = None,
        loader: TrackedLoader | None = None,
    ) -> None:
        self._schema_validator = SchemaValidator(schema)
        self._rewriter = MessageRewriter(catalog)
        self._loader = loader if loader is not None else TrackedLoader()

    def validate_file(self, path: Path) -> ValidationSummary:
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.validate_string(content, filename=str(path))

    def validate_string(self, content: str, filename: str = "<string>") -> ValidationSummary:
        """Parse *content*, run schema validation and return normalized errors.

        YAML syntax and safety problems are reported as a single error record
        and stop validation.
        """
        try:
            document, source_map = self._loader.load_string(content, filename=filename)
        except YAMLSafetyError as exc:
            logger.warning("Rejected %s: %s", filename, exc)
            return ValidationSummary(errors=frozenset({_parse_error(str(exc), None)}))
        except MarkedYAMLError as exc:
            line = exc.problem_mark.line + 1 if exc.problem_mark is not None else None
            return ValidationSummary(
                errors=frozenset({_parse_error(exc.problem or str(exc), line)})
            )
        except YAMLError as exc:
            return ValidationSummary(errors=frozenset({_parse_error(str(exc), None)}))

        report = self._schema_validator.validate(document)
        processor = ErrorProcessor(line_of=source_map.line_of, rewriter=self._rewriter)
        errors = processor.process_report(report)
        logger.info(
            "Validated %s: %d diagnostic(s) -> %d error record(s)",
            filename, len(report), len(errors),
        )
        return ValidationSummary(errors=errors)


def _parse_error(message: str, line: int | None) -> ErrorRecord:
    return ErrorRecord(line=line, severity=Severity.ERROR, message=message, indent=0)


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------


def _render_record(record: ErrorRecord, lines: list[str]) -> None:
    pad = "    " * record.indent
    where = f"line {record.line}" if record.line is not None else "line ?"
    lines.append(f"{pad}{record.severity.upper()} {where}: {record.message}")
    if isinstance(record, MultiAlternativeErrorRecord):
        for key, alternative in sorted(record.alternatives.items()):
            lines.append(f"{pad}  - {key}:")
            for child in sort_records(alternative):
                _render_record(child, lines)


def render_outline(records: frozenset[ErrorRecord] | list[ErrorRecord]) -> list[str]:
    """Render records as an indented outline, one line per record."""
    lines: list[str] = []
    for record in sort_records(records):
        _render_record(record, lines)
    return lines
