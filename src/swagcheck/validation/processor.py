"""Flattens raw validator reports into a deduplicated forest of error records.

Raw reports are irregular: a diagnostic may be a list of diagnostics, a plain
diagnostic, or a combinator diagnostic (``oneOf``/``anyOf``) carrying one
sub-report per alternative schema. Each node is classified once into a
tagged variant and the walk recurses on combinator reports one indent level
deeper.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from swagcheck.models.errors import ErrorRecord, MultiAlternativeErrorRecord
from swagcheck.validation.messages import MessageRewriter, RawDiagnostic

logger = logging.getLogger("swagcheck.validation")

LineLookup = Callable[[str], int | None]


# ---------------------------------------------------------------------------
# Node classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LeafNode:
    diagnostic: RawDiagnostic


@dataclass(frozen=True)
class CombinatorNode:
    diagnostic: RawDiagnostic
    reports: Mapping[str, Any]


@dataclass(frozen=True)
class SequenceNode:
    items: tuple[Any, ...]


DiagnosticNode = LeafNode | CombinatorNode | SequenceNode


def _schema_count(diagnostic: RawDiagnostic) -> int:
    value = diagnostic.get("nrSchemas")
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return 0


def classify(node: Any) -> DiagnosticNode | None:
    """Resolve the shape of a raw report node; ``None`` for unusable shapes."""
    if isinstance(node, Mapping):
        if _schema_count(node) > 1:
            reports = node.get("reports")
            if isinstance(reports, Mapping) and reports:
                return CombinatorNode(diagnostic=node, reports=reports)
            logger.debug("Combinator diagnostic without reports; treating as leaf")
        return LeafNode(diagnostic=node)
    if isinstance(node, list | tuple):
        return SequenceNode(items=tuple(node))
    return None


def pointer_of(diagnostic: RawDiagnostic) -> str:
    """Return the JSON pointer of the document node a diagnostic refers to."""
    instance = diagnostic.get("instance")
    if isinstance(instance, Mapping):
        pointer = instance.get("pointer", "")
        return pointer if isinstance(pointer, str) else ""
    if isinstance(instance, str):
        return instance
    return ""


def _unknown_line(pointer: str) -> int | None:
    return None


# ---------------------------------------------------------------------------
# ErrorProcessor
# ---------------------------------------------------------------------------


class ErrorProcessor:
    """Creates :class:`ErrorRecord` sets from raw validation reports.

    ``line_of`` resolves a diagnostic's instance pointer to a source line
    (``None`` when unknown); typically :meth:`SourceMap.line_of`.
    """

    def __init__(
        self,
        line_of: LineLookup | None = None,
        rewriter: MessageRewriter | None = None,
    ) -> None:
        self._line_of = line_of if line_of is not None else _unknown_line
        self._rewriter = rewriter if rewriter is not None else MessageRewriter()

    def process_report(
        self, report: Iterable[RawDiagnostic] | RawDiagnostic | None
    ) -> frozenset[ErrorRecord]:
        """Return the set of error records created from a validation report."""
        if report is None:
            return frozenset()
        if isinstance(report, Mapping):
            return self.process_message(report)
        if not isinstance(report, Iterable):
            return self._from_node(report, 0)
        errors: set[ErrorRecord] = set()
        for message in report:
            errors |= self.process_message(message)
        return frozenset(errors)

    def process_message(self, message: RawDiagnostic) -> frozenset[ErrorRecord]:
        """Return the set of error records created from one validation message."""
        return self._from_node(message, 0)

    def _from_node(self, node: Any, indent: int) -> frozenset[ErrorRecord]:
        match classify(node):
            case SequenceNode(items=items):
                errors: set[ErrorRecord] = set()
                for item in items:
                    errors |= self._from_node(item, indent)
                return frozenset(errors)
            case CombinatorNode(diagnostic=diagnostic, reports=reports):
                return frozenset({self._create_multiple(diagnostic, reports, indent)})
            case LeafNode(diagnostic=diagnostic):
                return frozenset({self._create_unique(diagnostic, indent)})
            case _:
                logger.debug("Skipping malformed report node of type %s", type(node).__name__)
                return frozenset()

    def _create_unique(self, diagnostic: RawDiagnostic, indent: int) -> ErrorRecord:
        severity, message = self._rewriter.rewrite(diagnostic)
        return ErrorRecord(
            line=self._line_of(pointer_of(diagnostic)),
            severity=severity,
            message=message,
            indent=indent,
        )

    def _create_multiple(
        self, diagnostic: RawDiagnostic, reports: Mapping[str, Any], indent: int
    ) -> MultiAlternativeErrorRecord:
        severity, message = self._rewriter.rewrite(diagnostic)
        alternatives = {
            str(key): self._from_node(value, indent + 1) for key, value in reports.items()
        }
        return MultiAlternativeErrorRecord(
            line=self._line_of(pointer_of(diagnostic)),
            severity=severity,
            message=message,
            indent=indent,
            alternatives=alternatives,
        )
