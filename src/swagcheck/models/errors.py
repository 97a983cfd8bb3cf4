"""Normalized error records produced from raw schema validation reports."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializationInfo, field_serializer


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Ordering weight; higher is more severe."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class SourceSpan(BaseModel):
    """Points to exact location in YAML source for error reporting."""

    file: str
    line: int
    column: int


class ErrorRecord(BaseModel):
    """A single human-readable validation error attributed to a source line.

    ``line`` is ``None`` when the originating node could not be located.
    ``indent`` is the number of combinator levels enclosing the record.
    """

    model_config = ConfigDict(frozen=True)

    line: int | None = None
    severity: Severity = Severity.INFO
    message: str = ""
    indent: int = Field(default=0, ge=0)


class MultiAlternativeErrorRecord(ErrorRecord):
    """A combinator failure: the node matched none of the alternative schemas.

    ``alternatives`` maps each alternative schema id to the errors reported
    against it, flattened one indent level deeper.
    """

    alternatives: dict[str, frozenset[ErrorRecord]] = Field(default_factory=dict)

    def __hash__(self) -> int:
        canonical = tuple(sorted(self.alternatives.items(), key=lambda item: item[0]))
        return hash((self.line, self.severity, self.message, self.indent, canonical))

    @field_serializer("alternatives")
    def _serialize_alternatives(
        self, alternatives: dict[str, frozenset[ErrorRecord]], info: SerializationInfo
    ) -> dict[str, list[dict[str, Any]]]:
        return {
            key: [record.model_dump(mode=info.mode) for record in sort_records(records)]
            for key, records in sorted(alternatives.items())
        }


def _sort_key(record: ErrorRecord) -> tuple[bool, int, int, int, str]:
    return (
        record.line is None,
        record.line or 0,
        -record.severity.rank,
        record.indent,
        record.message,
    )


def sort_records(records: Iterable[ErrorRecord]) -> list[ErrorRecord]:
    """Return records in presentation order: by line (unknown last), then most severe first."""
    return sorted(records, key=_sort_key)
