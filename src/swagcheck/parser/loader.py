"""YAML loader with position tracking for line-attributed error reporting."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from swagcheck.models.errors import SourceSpan

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 200_000
_MAX_DEPTH = 64

# Regex to detect YAML anchor definitions (&name).
# Matches & at line start or after whitespace/sequence indicators, followed by
# an anchor name, but NOT inside quoted strings (good-enough heuristic).
_ANCHOR_RE = re.compile(r"(?:^|[\s\-:])&(\w+)", re.MULTILINE)


class YAMLSafetyError(Exception):
    """Raised when YAML input violates safety constraints.

    Distinct from parse errors: these indicate potentially malicious input
    (e.g., billion-laughs anchors, excessive nesting, oversized documents).
    """


def escape_pointer_token(token: object) -> str:
    """Escape one reference token per RFC 6901."""
    return str(token).replace("~", "~0").replace("/", "~1")


def to_pointer(tokens: Any) -> str:
    """Build a JSON pointer from path tokens; an empty path is the root pointer ``""``."""
    return "".join(f"/{escape_pointer_token(token)}" for token in tokens)


@dataclass
class SourceMap:
    """Maps JSON pointers into the document to their source positions."""

    _positions: dict[str, SourceSpan] = field(default_factory=dict)

    def add(self, pointer: str, span: SourceSpan) -> None:
        self._positions[pointer] = span

    def get(self, pointer: str) -> SourceSpan | None:
        return self._positions.get(pointer)

    def line_of(self, pointer: str) -> int | None:
        """Return the source line of *pointer*, or of its nearest located ancestor.

        Returns ``None`` when neither the pointer nor any ancestor is known.
        """
        current = pointer
        while True:
            span = self._positions.get(current)
            if span is not None:
                return span.line
            if not current:
                return None
            current = current.rsplit("/", 1)[0]


class TrackedLoader:
    """YAML loader that tracks source positions for error reporting.

    Uses ruamel.yaml which preserves line/column info on every parsed node.
    JSON documents load too, JSON being a subset of YAML 1.2.
    """

    def __init__(
        self,
        max_document_size: int = _MAX_DOCUMENT_SIZE,
        max_node_count: int = _MAX_NODE_COUNT,
        max_depth: int = _MAX_DEPTH,
    ) -> None:
        self._yaml = YAML()
        self._yaml.preserve_quotes = True
        self._max_document_size = max_document_size
        self._max_node_count = max_node_count
        self._max_depth = max_depth

    # -- safety checks -------------------------------------------------------

    def _check_yaml_safety(self, content: str) -> None:
        """Pre-parse safety checks on raw YAML text.

        Raises ``YAMLSafetyError`` if the content contains anchors/aliases
        or exceeds the maximum document size.
        """
        if len(content) > self._max_document_size:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)"
            )
        if _ANCHOR_RE.search(content):
            raise YAMLSafetyError("YAML anchors/aliases are not supported")

    def _check_shape(self, data: Any) -> None:
        """Post-parse defense-in-depth: reject documents with too many nodes or too deep."""
        count = 0
        stack: list[tuple[Any, int]] = [(data, 1)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > self._max_node_count:
                raise YAMLSafetyError(
                    f"YAML document exceeds maximum node count ({self._max_node_count:,})"
                )
            if depth > self._max_depth:
                raise YAMLSafetyError(
                    f"YAML document exceeds maximum nesting depth ({self._max_depth})"
                )
            if isinstance(node, dict):
                stack.extend((child, depth + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, depth + 1) for child in node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> tuple[Any, SourceMap]:
        """Load a YAML file and return parsed data + source position map."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content, filename=str(path))

    def load_string(self, content: str, filename: str = "<string>") -> tuple[Any, SourceMap]:
        """Load YAML from a string."""
        self._check_yaml_safety(content)
        try:
            data = self._yaml.load(content)
        except RecursionError as exc:
            raise YAMLSafetyError(
                f"YAML document exceeds maximum nesting depth ({self._max_depth})"
            ) from exc
        if data is None:
            return {}, SourceMap()
        self._check_shape(data)
        source_map = SourceMap()
        self._extract_root_position(data, filename, source_map)
        self._extract_positions(data, filename, "", source_map)
        return self._to_plain_value(data), source_map

    @staticmethod
    def _extract_root_position(data: Any, filename: str, source_map: SourceMap) -> None:
        try:
            lc = data.lc
            source_map.add("", SourceSpan(file=filename, line=lc.line + 1, column=lc.col + 1))
        except (AttributeError, TypeError):
            source_map.add("", SourceSpan(file=filename, line=1, column=1))

    def _extract_positions(
        self,
        data: Any,
        filename: str,
        prefix: str,
        source_map: SourceMap,
    ) -> None:
        """Recursively extract source positions from ruamel.yaml nodes."""
        if isinstance(data, CommentedMap):
            for key in data:
                key_path = f"{prefix}/{escape_pointer_token(key)}"
                try:
                    key_positions = data.lc.key(key)
                    if key_positions:
                        line, col = key_positions
                        source_map.add(
                            key_path,
                            SourceSpan(file=filename, line=line + 1, column=col + 1),
                        )
                except (AttributeError, KeyError, TypeError):
                    # Fallback: use the map's own position
                    try:
                        lc = data.lc
                        source_map.add(
                            key_path,
                            SourceSpan(file=filename, line=lc.line + 1, column=lc.col + 1),
                        )
                    except (AttributeError, TypeError):
                        pass
                self._extract_positions(data[key], filename, key_path, source_map)
        elif isinstance(data, CommentedSeq):
            for i, item in enumerate(data):
                item_path = f"{prefix}/{i}"
                try:
                    item_pos = data.lc.item(i)
                    if item_pos:
                        line, col = item_pos
                        source_map.add(
                            item_path,
                            SourceSpan(file=filename, line=line + 1, column=col + 1),
                        )
                except (AttributeError, KeyError, TypeError):
                    pass
                self._extract_positions(item, filename, item_path, source_map)

    def _to_plain_value(self, data: Any) -> Any:
        """Convert ruamel.yaml CommentedMap/Seq and scalar strings to plain Python values."""
        if isinstance(data, dict):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, list):
            return [self._to_plain_value(item) for item in data]
        if isinstance(data, str):
            return str(data)
        return data
