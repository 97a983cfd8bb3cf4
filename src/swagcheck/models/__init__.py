"""Pydantic domain models for swagcheck."""

from swagcheck.models.errors import (
    ErrorRecord,
    MultiAlternativeErrorRecord,
    Severity,
    SourceSpan,
    sort_records,
)

__all__ = [
    "ErrorRecord",
    "MultiAlternativeErrorRecord",
    "Severity",
    "SourceSpan",
    "sort_records",
]
