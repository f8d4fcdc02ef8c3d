from pydantic import BaseModel
from typing import Optional, List, Dict, Union
from datetime import datetime
from .models import (
    ExcavationType, SoilType, ProximityScenario, HandDigMethod, VerticalExtent,
    HandDigOverrideType, ExcavatorClass, ValueSource, AuditCategory, CriticalPath,
)


class FrozenModel(BaseModel):
    """Immutable value object: produced by one stage, consumed by the next."""
    class Config:
        frozen = True


# --- Inputs ---

class Overridable(FrozenModel):
    """
    A value tagged with its provenance.

    AUTO fields are recomputed on every run (the stored value is only the last
    value shown to the user); MANUAL fields are used exactly as entered.
    """
    value: float
    source: ValueSource = ValueSource.AUTO

    @property
    def is_manual(self) -> bool:
        return self.source == ValueSource.MANUAL

    @classmethod
    def auto(cls, value: float) -> "Overridable":
        return cls(value=value, source=ValueSource.AUTO)

    @classmethod
    def manual(cls, value: float) -> "Overridable":
        return cls(value=value, source=ValueSource.MANUAL)


class PipeSpec(FrozenModel):
    nps: float                  # Nominal Pipe Size (inches)
    od: Overridable             # Outside diameter (inches)


class GeometrySpec(FrozenModel):
    length: float               # Linear feet
    depth: Overridable          # Feet
    bottom_width: Overridable   # Feet
    cover_to_top: float         # Cover to top of pipe (feet)


class SoilSpec(FrozenModel):
    soil_type: SoilType
    slope_ratio: Overridable    # Horizontal:Vertical, 0 = vertical walls


class HandDigOverride(FrozenModel):
    type: HandDigOverrideType
    value: float                # CY for fixed_cy, percent for percentage


class HandDigSpec(FrozenModel):
    proximity_scenario: ProximityScenario = ProximityScenario.NO_CONFLICT
    tolerance_zone_width: float = 2.0      # Feet
    buffer_length_each_side: float = 2.0   # Feet
    vertical_extent: VerticalExtent = VerticalExtent.FULL_DEPTH
    method: HandDigMethod = HandDigMethod.HAND_TOOLS
    override: Optional[HandDigOverride] = None  # None = scenario rules apply


class CrewSpec(FrozenModel):
    operators: int = 1
    laborers: int = 2
    foreman: bool = False
    spotter: bool = False
    competent_person: bool = True


class ScheduleSpec(FrozenModel):
    hours_per_day: float = 8.0
    shifts_per_day: int = 1
    working_days_per_week: int = 5


class EquipmentSpec(FrozenModel):
    excavator_class: ExcavatorClass = ExcavatorClass.MINI
    bucket_width: float = 24.0   # Inches
    use_vacuum_truck: bool = False
    use_sawcut: bool = False
    sawcut_length: float = 0.0   # Linear feet


class ExcavationInputs(FrozenModel):
    project_name: str
    excavation_type: ExcavationType = ExcavationType.TRENCH
    pipe: PipeSpec
    geometry: GeometrySpec
    soil: SoilSpec
    hand_dig: HandDigSpec = HandDigSpec()
    crew: CrewSpec = CrewSpec()
    schedule: ScheduleSpec = ScheduleSpec()
    equipment: EquipmentSpec = EquipmentSpec()


def default_inputs() -> ExcavationInputs:
    """A fresh default configuration. Callers get their own copy every time."""
    return ExcavationInputs(
        project_name="New Excavation Project",
        excavation_type=ExcavationType.TRENCH,
        pipe=PipeSpec(nps=4, od=Overridable.auto(4.5)),
        geometry=GeometrySpec(
            length=100.0,
            depth=Overridable.auto(4.0),
            bottom_width=Overridable.auto(2.0),
            cover_to_top=3.0,
        ),
        soil=SoilSpec(soil_type=SoilType.TYPE_B, slope_ratio=Overridable.auto(1.0)),
        hand_dig=HandDigSpec(),
        crew=CrewSpec(),
        schedule=ScheduleSpec(),
        equipment=EquipmentSpec(),
    )


# --- Stage results ---

class GeometryResult(FrozenModel):
    bottom_width: float         # Feet
    top_width: float            # Feet
    depth: float                # Feet
    length: float               # Feet
    bedding_depth: float        # Feet
    cross_section_area: float   # Square feet
    is_sloped: bool
    od: float                   # Resolved outside diameter (inches)
    slope_ratio: float          # Resolved H:V


class BulkVolume(FrozenModel):
    bank_volume: float          # Cubic yards
    loose_volume: float         # Cubic yards
    swell_factor: float


class HandDigSplit(FrozenModel):
    hand_dig_volume: float      # Cubic yards
    machine_dig_volume: float   # Cubic yards
    hand_dig_percentage: float
    machine_dig_percentage: float
    mode: str                   # scenario name or "override_fixed_cy" / "override_percentage"


class VolumeResult(FrozenModel):
    bank_volume: float
    loose_volume: float
    swell_factor: float
    machine_dig_volume: float
    hand_dig_volume: float


class ProductionResult(FrozenModel):
    machine_rate: float         # CY/hr
    hand_rate: float            # CY/hr per laborer
    vacuum_rate: float          # CY/hr
    machine_hours: float
    hand_hours: float
    sawcut_hours: float
    vacuum_hours: float
    total_equipment_hours: float
    total_labor_hours: float


class DurationResult(FrozenModel):
    machine_duration: float     # Workdays
    hand_duration: float        # Workdays
    total_duration: float       # Workdays
    critical_path: CriticalPath
    calendar_days: float


class CrewSummary(FrozenModel):
    operator_hours: float
    laborer_hours: float
    foreman_hours: float
    spotter_hours: float
    competent_person_hours: float
    total_labor_hours: float


class EquipmentSummary(FrozenModel):
    excavator_hours: float
    vacuum_truck_hours: float
    sawcut_equipment_hours: float
    total_equipment_hours: float


class ScheduleSummary(FrozenModel):
    duration: DurationResult
    crew_summary: CrewSummary
    equipment_summary: EquipmentSummary


class AuditEntry(FrozenModel):
    id: str
    category: AuditCategory
    title: str
    description: str
    formula: Optional[str] = None
    inputs: Optional[Dict[str, Union[str, int, float]]] = None
    result: Optional[str] = None
    timestamp: datetime


class CalculationResult(FrozenModel):
    id: str
    timestamp: datetime
    inputs: ExcavationInputs
    geometry: GeometryResult
    volume: VolumeResult
    hand_dig: HandDigSplit
    production: ProductionResult
    duration: DurationResult
    crew_summary: CrewSummary
    equipment_summary: EquipmentSummary
    audit_trail: List[AuditEntry]


class CalculationOutcome(FrozenModel):
    """Either a result or the validation errors that stopped the run."""
    result: Optional[CalculationResult] = None
    errors: Dict[str, str] = {}

    @property
    def ok(self) -> bool:
        return self.result is not None and not self.errors


class ExportDocument(BaseModel):
    """The flat export format. Only the inputs are needed to rebuild a result."""
    project_name: str
    export_date: datetime
    inputs: ExcavationInputs
    results: Dict[str, Union[float, str]] = {}
    audit_trail: List[AuditEntry] = []


# --- API ---

class ValidationReport(BaseModel):
    is_valid: bool
    errors: Dict[str, str] = {}


class SavedCalculationSummary(BaseModel):
    id: str
    name: str
    created_at: datetime
    class Config:
        from_attributes = True
