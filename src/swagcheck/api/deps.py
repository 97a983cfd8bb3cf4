"""Dependency injection for FastAPI: default DocumentValidator, message catalog and loader."""

from __future__ import annotations

from swagcheck.parser.loader import TrackedLoader
from swagcheck.service.document_validator import DocumentValidator
from swagcheck.validation.messages import MessageCatalog

_validator: DocumentValidator | None = None
_catalog: MessageCatalog | None = None
_loader: TrackedLoader | None = None


def init_validator(
    validator: DocumentValidator | None,
    *,
    catalog: MessageCatalog | None = None,
    loader: TrackedLoader | None = None,
) -> None:
    """Set the default DocumentValidator, catalog and loader (called at app startup)."""
    global _validator, _catalog, _loader  # noqa: PLW0603
    _validator = validator
    _catalog = catalog
    _loader = loader


def get_default_validator() -> DocumentValidator | None:
    """FastAPI ``Depends`` provider; ``None`` when no default schema is configured."""
    return _validator


def get_catalog() -> MessageCatalog:
    """FastAPI ``Depends`` provider for the active message catalog."""
    return _catalog if _catalog is not None else MessageCatalog()


def get_loader() -> TrackedLoader:
    """FastAPI ``Depends`` provider for the loader carrying the configured safety limits."""
    return _loader if _loader is not None else TrackedLoader()


def reset_validator() -> None:
    """Clear the global validator (for tests)."""
    global _validator, _catalog, _loader  # noqa: PLW0603
    _validator = None
    _catalog = None
    _loader = None
