"""Severity mapping and keyword-specific rewriting of raw validator messages."""

from __future__ import annotations

import json
import logging
import string
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from ruamel.yaml import YAML

from swagcheck.models.errors import Severity

logger = logging.getLogger("swagcheck.validation")

RawDiagnostic = Mapping[str, Any]

# Placeholders each template may reference.
_PLACEHOLDERS: dict[str, frozenset[str]] = {
    "type_mismatch": frozenset({"found", "expected"}),
    "not_in_enum": frozenset({"value", "enum"}),
    "additional_properties": frozenset({"unwanted"}),
    "required_properties": frozenset({"missing"}),
}


class MessageCatalog(BaseModel):
    """Human-readable templates for the rewritten keywords.

    Templates use ``str.format`` named placeholders. A catalog is passed
    explicitly to :class:`MessageRewriter`; localized catalogs are loaded
    with :meth:`from_yaml`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type_mismatch: str = "{found} does not match expected type {expected}"
    not_in_enum: str = "{value} is not a valid enumeration value among [{enum}]"
    additional_properties: str = "additional properties not allowed: {unwanted}"
    required_properties: str = "missing required properties: {missing}"

    @model_validator(mode="after")
    def _check_placeholders(self) -> MessageCatalog:
        formatter = string.Formatter()
        for name, allowed in _PLACEHOLDERS.items():
            template = getattr(self, name)
            for _, field_name, format_spec, _ in formatter.parse(template):
                if field_name is None:
                    continue
                if field_name not in allowed:
                    raise ValueError(
                        f"Template '{name}' uses unknown placeholder '{{{field_name}}}'; "
                        f"allowed: {', '.join(sorted(allowed))}"
                    )
                if format_spec and "{" in format_spec:
                    raise ValueError(
                        f"Template '{name}' nests a placeholder in the format spec of "
                        f"'{{{field_name}}}'"
                    )
            # Rendered values are always strings.
            try:
                template.format(**dict.fromkeys(allowed, "x"))
            except (ValueError, IndexError, KeyError) as exc:
                raise ValueError(f"Template '{name}' cannot be rendered: {exc}") from exc
        return self

    @classmethod
    def from_yaml(cls, path: Path) -> MessageCatalog:
        """Load template overrides from a YAML (or JSON) mapping; absent keys keep defaults."""
        with path.open("r", encoding="utf-8") as handle:
            data = YAML(typ="safe").load(handle)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Message catalog {path} must be a mapping of template names")
        return cls.model_validate(data)


def as_text(value: Any) -> str:
    """Render a JSON value as plain text (strings unquoted)."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int | float):
        return str(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, list | tuple)


def _join(values: Any) -> str:
    return ", ".join(as_text(v) for v in values)


def severity_of(diagnostic: RawDiagnostic) -> Severity:
    """Map a diagnostic's ``level`` to a :class:`Severity`."""
    if "level" not in diagnostic:
        return Severity.INFO
    match as_text(diagnostic["level"]):
        case "error" | "fatal":
            return Severity.ERROR
        case "warning":
            return Severity.WARNING
        case _:
            return Severity.INFO


class MessageRewriter:
    """Produces severity and human-readable text for one raw diagnostic."""

    def __init__(self, catalog: MessageCatalog | None = None) -> None:
        self._catalog = catalog if catalog is not None else MessageCatalog()
        self._handlers: dict[str, Callable[[RawDiagnostic], str | None]] = {
            "type": self._rewrite_type,
            "enum": self._rewrite_enum,
            "additionalProperties": self._rewrite_additional_properties,
            "required": self._rewrite_required,
        }

    def rewrite(self, diagnostic: RawDiagnostic) -> tuple[Severity, str]:
        return severity_of(diagnostic), self.message_of(diagnostic)

    def message_of(self, diagnostic: RawDiagnostic) -> str:
        if "keyword" not in diagnostic:
            return ""
        keyword = as_text(diagnostic["keyword"])
        handler = self._handlers.get(keyword)
        if handler is not None:
            message = handler(diagnostic)
            if message is not None:
                return message
            logger.debug("Payload missing for keyword '%s'; using raw message", keyword)
        return self._passthrough(diagnostic)

    @staticmethod
    def _passthrough(diagnostic: RawDiagnostic) -> str:
        message = diagnostic.get("message")
        return "" if message is None else as_text(message)

    # -- keyword handlers: None means the payload is unusable ----------------

    def _rewrite_type(self, diagnostic: RawDiagnostic) -> str | None:
        if "found" not in diagnostic or "expected" not in diagnostic:
            return None
        expected = diagnostic["expected"]
        if _is_sequence(expected):
            if not expected:
                return None
            expected = expected[0]
        return self._catalog.type_mismatch.format(
            found=as_text(diagnostic["found"]), expected=as_text(expected)
        )

    def _rewrite_enum(self, diagnostic: RawDiagnostic) -> str | None:
        enum = diagnostic.get("enum")
        if "value" not in diagnostic or not _is_sequence(enum):
            return None
        return self._catalog.not_in_enum.format(
            value=as_text(diagnostic["value"]), enum=_join(enum)
        )

    def _rewrite_additional_properties(self, diagnostic: RawDiagnostic) -> str | None:
        unwanted = diagnostic.get("unwanted")
        if not _is_sequence(unwanted):
            return None
        return self._catalog.additional_properties.format(unwanted=_join(unwanted))

    def _rewrite_required(self, diagnostic: RawDiagnostic) -> str | None:
        missing = diagnostic.get("missing")
        if not _is_sequence(missing):
            return None
        return self._catalog.required_properties.format(missing=_join(missing))
