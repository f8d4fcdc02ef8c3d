"""
Calculation endpoints.

GET  /api/calculations/defaults  fresh default inputs
POST /api/calculations/validate  field-path keyed errors, no calculation
POST /api/calculations/          validate + calculate (optionally save)
POST /api/calculations/export    calculate and download the JSON export
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import schemas
from ..calculators.pipeline import CalculationFailed, ExcavationPipeline
from ..calculators.validation import validate_inputs
from ..database import get_db
from ..exporter import export_calculation, content_disposition
from ..storage import SavedCalculationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculations", tags=["calculations"])


def get_pipeline() -> ExcavationPipeline:
    return ExcavationPipeline()


def run_or_raise(inputs: schemas.ExcavationInputs, pipeline: ExcavationPipeline) -> schemas.CalculationResult:
    try:
        outcome = pipeline.calculate(inputs)
    except CalculationFailed:
        raise HTTPException(status_code=500, detail="Calculation failed")
    if not outcome.ok:
        raise HTTPException(status_code=422, detail={"errors": outcome.errors})
    return outcome.result


@router.get("/defaults", response_model=schemas.ExcavationInputs)
def get_defaults():
    return schemas.default_inputs()


@router.post("/validate", response_model=schemas.ValidationReport)
def validate(inputs: schemas.ExcavationInputs):
    errors = validate_inputs(inputs)
    return schemas.ValidationReport(is_valid=not errors, errors=errors)


@router.post("/", response_model=schemas.CalculationResult)
def run_calculation(
    inputs: schemas.ExcavationInputs,
    save: bool = False,
    db: Session = Depends(get_db),
    pipeline: ExcavationPipeline = Depends(get_pipeline),
):
    result = run_or_raise(inputs, pipeline)
    if save:
        SavedCalculationStore(db).save(result)
    return result


@router.post("/export")
def export(
    inputs: schemas.ExcavationInputs,
    pipeline: ExcavationPipeline = Depends(get_pipeline),
):
    """Calculate and return the export document as a download."""
    result = run_or_raise(inputs, pipeline)
    return JSONResponse(
        content=export_calculation(result),
        headers={
            "Content-Disposition": content_disposition(inputs.project_name),
        },
    )
