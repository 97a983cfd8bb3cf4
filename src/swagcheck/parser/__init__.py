"""YAML parsing with line fidelity for swagcheck."""

from swagcheck.parser.loader import SourceMap, TrackedLoader, YAMLSafetyError, to_pointer

__all__ = [
    "SourceMap",
    "TrackedLoader",
    "YAMLSafetyError",
    "to_pointer",
]
