"""Validation services shared by the CLI and the REST API."""

from swagcheck.service.document_validator import (
    DocumentValidator,
    ValidationSummary,
    render_outline,
)

__all__ = [
    "DocumentValidator",
    "ValidationSummary",
    "render_outline",
]
