"""API request/response Pydantic schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from swagcheck.models.errors import ErrorRecord, MultiAlternativeErrorRecord, sort_records


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    document: str = Field(description="YAML or JSON document content to validate")
    json_schema: dict[str, Any] | None = Field(
        default=None,
        alias="schema",
        description="JSON Schema to validate against; the server default when omitted",
    )


class ErrorDetail(BaseModel):
    """A single normalized validation error, with nested alternatives for combinator failures."""

    line: int | None = None
    severity: str
    message: str
    indent: int = 0
    alternatives: dict[str, list[ErrorDetail]] | None = None

    @classmethod
    def from_record(cls, record: ErrorRecord) -> ErrorDetail:
        alternatives = None
        if isinstance(record, MultiAlternativeErrorRecord):
            alternatives = {
                key: [cls.from_record(child) for child in sort_records(children)]
                for key, children in sorted(record.alternatives.items())
            }
        return cls(
            line=record.line,
            severity=record.severity.value,
            message=record.message,
            indent=record.indent,
            alternatives=alternatives,
        )


class ValidateResponse(BaseModel):
    """Response body for POST /validate."""

    valid: bool
    errors: list[ErrorDetail] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
