"""Schema validation and normalization of validator reports into error records."""

from swagcheck.validation.messages import MessageCatalog, MessageRewriter, severity_of
from swagcheck.validation.processor import ErrorProcessor, classify
from swagcheck.validation.schema import SchemaEvaluationError, SchemaValidator, load_schema

__all__ = [
    "ErrorProcessor",
    "MessageCatalog",
    "MessageRewriter",
    "SchemaEvaluationError",
    "SchemaValidator",
    "classify",
    "load_schema",
    "severity_of",
]
