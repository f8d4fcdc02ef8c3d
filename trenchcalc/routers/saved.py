from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List
from pydantic import ValidationError
from .. import schemas
from ..database import get_db
from ..calculators.pipeline import ExcavationPipeline
from ..exporter import export_calculation, content_disposition, parse_import_document
from ..storage import SavedCalculationStore
from .calculations import get_pipeline, run_or_raise

router = APIRouter(prefix="/saved", tags=["saved"])


def get_store(db: Session = Depends(get_db)) -> SavedCalculationStore:
    return SavedCalculationStore(db)


@router.get("/", response_model=List[schemas.SavedCalculationSummary])
def list_saved(store: SavedCalculationStore = Depends(get_store)):
    return store.list()


@router.delete("/")
def clear_saved(store: SavedCalculationStore = Depends(get_store)):
    return {"deleted": store.clear()}


@router.get("/latest", response_model=schemas.CalculationResult)
def get_latest(store: SavedCalculationStore = Depends(get_store)):
    row = store.latest()
    if not row:
        raise HTTPException(status_code=404, detail="No saved calculations")
    return store.load_result(row)


@router.get("/{calculation_id}", response_model=schemas.CalculationResult)
def get_saved(calculation_id: str, store: SavedCalculationStore = Depends(get_store)):
    row = store.get(calculation_id)
    if not row:
        raise HTTPException(status_code=404, detail="Saved calculation not found")
    return store.load_result(row)


@router.delete("/{calculation_id}")
def delete_saved(calculation_id: str, store: SavedCalculationStore = Depends(get_store)):
    if not store.delete(calculation_id):
        raise HTTPException(status_code=404, detail="Saved calculation not found")
    return {"deleted": calculation_id}


@router.get("/{calculation_id}/export")
def export_saved(calculation_id: str, store: SavedCalculationStore = Depends(get_store)):
    row = store.get(calculation_id)
    if not row:
        raise HTTPException(status_code=404, detail="Saved calculation not found")
    result = store.load_result(row)
    return JSONResponse(
        content=export_calculation(result),
        headers={
            "Content-Disposition": content_disposition(row.name),
        },
    )


@router.post("/import", response_model=schemas.CalculationResult)
def import_calculation(
    document: dict = Body(...),
    store: SavedCalculationStore = Depends(get_store),
    pipeline: ExcavationPipeline = Depends(get_pipeline),
):
    """
    Save an uploaded result. A full CalculationResult is stored as is; an
    export document is recalculated from its inputs.
    """
    try:
        parsed = parse_import_document(document)
    except ValidationError as e:
        errors = {".".join(str(p) for p in err["loc"]) or "document": err["msg"]
                  for err in e.errors()}
        raise HTTPException(status_code=422, detail={"errors": errors})

    if isinstance(parsed, schemas.CalculationResult):
        result = parsed
    else:
        result = run_or_raise(parsed.inputs, pipeline)
    store.save(result)
    return result
