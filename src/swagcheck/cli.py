"""Command-line entry point: validate a Swagger/OpenAPI YAML document against a JSON Schema."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from jsonschema.exceptions import SchemaError

from swagcheck.parser.loader import TrackedLoader
from swagcheck.service.document_validator import DocumentValidator, render_outline
from swagcheck.settings import Settings
from swagcheck.validation.messages import MessageCatalog
from swagcheck.validation.schema import SchemaEvaluationError, load_schema

logger = logging.getLogger("swagcheck.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swagcheck",
        description="Validate a YAML/JSON document and report line-attributed errors",
    )
    parser.add_argument("document", help="Document to validate (YAML or JSON)")
    parser.add_argument("--schema", help="JSON Schema file (defaults to SCHEMA_FILE)")
    parser.add_argument("--messages", help="Message catalog overrides (defaults to MESSAGES_FILE)")
    parser.add_argument("--format", choices=["text", "json"], default="text",
                        help="Output format")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    schema_path = Path(args.schema) if args.schema else settings.schema_file
    if schema_path is None:
        print("error: no schema given (use --schema or set SCHEMA_FILE)", file=sys.stderr)
        return EXIT_USAGE
    messages_path = Path(args.messages) if args.messages else settings.messages_file
    logger.debug("Validating %s against %s", args.document, schema_path)

    try:
        catalog = MessageCatalog.from_yaml(messages_path) if messages_path else MessageCatalog()
        validator = DocumentValidator(
            load_schema(schema_path),
            catalog=catalog,
            loader=TrackedLoader(max_document_size=settings.max_document_size),
        )
        summary = validator.validate_file(Path(args.document))
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except SchemaError as exc:
        print(f"error: invalid schema: {exc.message}", file=sys.stderr)
        return EXIT_USAGE
    except SchemaEvaluationError as exc:
        print(f"error: invalid schema: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.format == "json":
        payload = {
            "valid": summary.valid,
            "errors": [record.model_dump(mode="json") for record in summary.sorted_errors()],
        }
        print(json.dumps(payload, indent=2))
    else:
        for line in render_outline(summary.errors):
            print(line)
        print("valid" if summary.valid else f"{len(summary.errors)} problem(s) found")

    return EXIT_OK if summary.valid else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
