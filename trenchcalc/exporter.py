"""
JSON export and import of calculation results.

The export is a flat, human-readable document: the inputs as entered, the
headline quantities, and the full audit trail. Import takes either that
document or a full CalculationResult.
"""

import re
import urllib.parse
from datetime import datetime
from typing import Union

from .schemas import CalculationResult, ExportDocument


def export_calculation(result: CalculationResult, export_date: datetime = None) -> dict:
    """Build the export document for a result. JSON-serializable as returned."""
    export_date = export_date or datetime.utcnow()
    return {
        "project_name": result.inputs.project_name,
        "export_date": export_date.isoformat(),
        "inputs": result.inputs.model_dump(mode="json"),
        "results": {
            "bank_volume": result.volume.bank_volume,
            "loose_volume": result.volume.loose_volume,
            "machine_dig_volume": result.volume.machine_dig_volume,
            "hand_dig_volume": result.volume.hand_dig_volume,
            "total_labor_hours": result.production.total_labor_hours,
            "total_equipment_hours": result.production.total_equipment_hours,
            "total_duration": result.duration.total_duration,
            "critical_path": result.duration.critical_path.value,
        },
        "audit_trail": [entry.model_dump(mode="json") for entry in result.audit_trail],
    }


def parse_import_document(document: dict) -> Union[CalculationResult, ExportDocument]:
    """
    A document carrying stage results is a full CalculationResult; anything
    else must be an export document. Raises pydantic.ValidationError.
    """
    if "geometry" in document:
        return CalculationResult.model_validate(document)
    return ExportDocument.model_validate(document)


def export_filename(project_name: str) -> str:
    """'Main St Water' → 'Main_St_Water_excavation_calc.json'. ASCII only."""
    safe_name = re.sub(r"[^A-Za-z0-9.-]+", "_", project_name).strip("_") or "calculation"
    return f"{safe_name}_excavation_calc.json"


def content_disposition(project_name: str) -> str:
    """Attachment header: ASCII filename plus the UTF-8 original (RFC 5987)."""
    utf8_name = urllib.parse.quote(f"{project_name}_excavation_calc.json", safe="")
    return (f'attachment; filename="{export_filename(project_name)}"; '
            f"filename*=UTF-8''{utf8_name}")
