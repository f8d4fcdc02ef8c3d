"""
Audit trail recording.

Every stage gets the same AuditSink for a run and appends to it. Entries are
write-once; the sink only grows. The clock is injectable so tests can pin
timestamps.
"""

import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional, Union

from ..models import AuditCategory
from ..schemas import AuditEntry, ExcavationInputs

AuditValue = Union[str, int, float]

CATEGORY_ORDER = {
    AuditCategory.INPUT: 0,
    AuditCategory.GEOMETRY: 1,
    AuditCategory.VOLUME: 2,
    AuditCategory.PRODUCTION: 3,
    AuditCategory.DURATION: 4,
}

CATEGORY_DISPLAY_NAMES = {
    AuditCategory.INPUT: "Inputs",
    AuditCategory.GEOMETRY: "Geometry Calculations",
    AuditCategory.VOLUME: "Volume Calculations",
    AuditCategory.PRODUCTION: "Production Calculations",
    AuditCategory.DURATION: "Duration & Summary",
}


class AuditSink:
    """Append-only collector of AuditEntry records for one calculation run."""

    def __init__(self, clock: Callable[[], datetime] = None):
        self._clock = clock or datetime.utcnow
        self._entries: List[AuditEntry] = []

    def record(self, category: AuditCategory, title: str, description: str,
               formula: Optional[str] = None,
               inputs: Optional[Dict[str, AuditValue]] = None,
               result: Optional[str] = None) -> AuditEntry:
        entry = AuditEntry(
            id=f"{category.value}-{uuid.uuid4().hex[:12]}",
            category=category,
            title=title,
            description=description,
            formula=formula,
            inputs=inputs,
            result=result,
            timestamp=self._clock(),
        )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _provenance(field) -> str:
    return "(manual)" if field.is_manual else "(auto)"


def _label(value: str) -> str:
    return value.replace("_", " ")


def record_input_entries(inputs: ExcavationInputs, sink: AuditSink) -> None:
    """Snapshot the user-facing inputs as `input` entries, one per input group."""
    sink.record(AuditCategory.INPUT, "Project Name", "Project identification",
                result=inputs.project_name)
    sink.record(AuditCategory.INPUT, "Excavation Type", "Type of excavation",
                result=_label(inputs.excavation_type.value))
    sink.record(
        AuditCategory.INPUT, "Pipe Configuration", "Pipe size and dimensions",
        inputs={
            "nps": f'{inputs.pipe.nps}"',
            "od": f'{inputs.pipe.od.value}" {_provenance(inputs.pipe.od)}',
        },
    )
    geometry = inputs.geometry
    sink.record(
        AuditCategory.INPUT, "Geometry Inputs", "Excavation dimensions",
        inputs={
            "length": f"{geometry.length} ft",
            "cover_to_top": f"{geometry.cover_to_top} ft",
            "depth": f"{geometry.depth.value} ft {_provenance(geometry.depth)}",
            "bottom_width": f"{geometry.bottom_width.value} ft {_provenance(geometry.bottom_width)}",
        },
    )
    sink.record(
        AuditCategory.INPUT, "Soil & Slope", "Soil classification and sloping",
        inputs={
            "soil_type": _label(inputs.soil.soil_type.value),
            "slope_ratio": f"{inputs.soil.slope_ratio.value}:1 {_provenance(inputs.soil.slope_ratio)}",
        },
    )
    crew = inputs.crew
    sink.record(
        AuditCategory.INPUT, "Crew Configuration", "Assigned crew members",
        inputs={
            "operators": crew.operators,
            "laborers": crew.laborers,
            "foreman": _yes_no(crew.foreman),
            "spotter": _yes_no(crew.spotter),
            "competent_person": _yes_no(crew.competent_person),
        },
    )
    schedule = inputs.schedule
    sink.record(
        AuditCategory.INPUT, "Work Schedule", "Daily work schedule",
        inputs={
            "hours_per_day": f"{schedule.hours_per_day} hrs",
            "shifts_per_day": schedule.shifts_per_day,
            "working_days_per_week": f"{schedule.working_days_per_week} days/week",
        },
    )
    equipment = inputs.equipment
    sink.record(
        AuditCategory.INPUT, "Equipment Selection", "Excavation equipment",
        inputs={
            "excavator_class": equipment.excavator_class.value,
            "bucket_width": f'{equipment.bucket_width}"',
            "vacuum_truck": _yes_no(equipment.use_vacuum_truck),
            "sawcut": f"Yes ({equipment.sawcut_length} LF)" if equipment.use_sawcut else "No",
        },
    )
    hand_dig = inputs.hand_dig
    proximity = {
        "scenario": _label(hand_dig.proximity_scenario.value),
        "method": _label(hand_dig.method.value),
        "tolerance_zone": f"{hand_dig.tolerance_zone_width} ft",
        "buffer": f"{hand_dig.buffer_length_each_side} ft each side",
        "vertical_extent": _label(hand_dig.vertical_extent.value),
    }
    if hand_dig.override is not None:
        proximity["override"] = f"{hand_dig.override.value} ({hand_dig.override.type.value})"
    sink.record(AuditCategory.INPUT, "Utility Proximity", "Hand dig configuration",
                inputs=proximity)


def sort_audit_entries(entries) -> List[AuditEntry]:
    """Category precedence first, then timestamp. Stable for ties."""
    return sorted(entries, key=lambda e: (CATEGORY_ORDER[e.category], e.timestamp))


def filter_by_category(entries, category: AuditCategory) -> List[AuditEntry]:
    return [e for e in entries if e.category == category]


def category_display_name(category: AuditCategory) -> str:
    return CATEGORY_DISPLAY_NAMES[category]
