"""Validation endpoint: POST /validate."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from jsonschema.exceptions import SchemaError

from swagcheck.api.deps import get_catalog, get_default_validator, get_loader
from swagcheck.api.schemas import ErrorDetail, ValidateRequest, ValidateResponse
from swagcheck.parser.loader import TrackedLoader
from swagcheck.service.document_validator import DocumentValidator
from swagcheck.validation.messages import MessageCatalog
from swagcheck.validation.schema import SchemaEvaluationError

router = APIRouter()

logger = logging.getLogger("swagcheck.api")


@router.post("", response_model=ValidateResponse)
async def validate_document(
    body: ValidateRequest,
    default_validator: Annotated[DocumentValidator | None, Depends(get_default_validator)],
    catalog: Annotated[MessageCatalog, Depends(get_catalog)],
    loader: Annotated[TrackedLoader, Depends(get_loader)],
) -> ValidateResponse:
    """Validate a YAML/JSON document and return normalized, line-attributed errors."""
    if body.json_schema is not None:
        try:
            validator = DocumentValidator(body.json_schema, catalog=catalog, loader=loader)
        except SchemaError as exc:
            raise HTTPException(status_code=422, detail=f"Invalid schema: {exc.message}") from exc
    elif default_validator is not None:
        validator = default_validator
    else:
        raise HTTPException(
            status_code=400,
            detail="No schema supplied and no default schema configured",
        )

    try:
        summary = validator.validate_string(body.document)
    except SchemaEvaluationError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid schema: {exc}") from exc
    logger.info("validate: %d error record(s), valid=%s", len(summary.errors), summary.valid)
    return ValidateResponse(
        valid=summary.valid,
        errors=[ErrorDetail.from_record(record) for record in summary.sorted_errors()],
    )
