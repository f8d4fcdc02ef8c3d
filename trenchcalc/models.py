from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime
from .database import Base
import enum


# --- Enums (shared by schemas, reference tables and the calculators) ---

class ExcavationType(str, enum.Enum):
    TRENCH = "trench"
    BELL_HOLE = "bell_hole"
    POTHOLE = "pothole"


class SoilType(str, enum.Enum):
    """OSHA soil classification."""
    STABLE_ROCK = "stable_rock"
    TYPE_A = "type_a"
    TYPE_B = "type_b"
    TYPE_C = "type_c"


class ProximityScenario(str, enum.Enum):
    NO_CONFLICT = "no_conflict"
    PARALLEL = "parallel"
    CROSSING = "crossing"
    EXPOSURE = "exposure"


class HandDigMethod(str, enum.Enum):
    HAND_TOOLS = "hand_tools"
    VACUUM = "vacuum"


class VerticalExtent(str, enum.Enum):
    FULL_DEPTH = "full_depth"
    PIPE_ZONE = "pipe_zone"


class HandDigOverrideType(str, enum.Enum):
    FIXED_CY = "fixed_cy"
    PERCENTAGE = "percentage"


class ExcavatorClass(str, enum.Enum):
    MICRO = "micro"
    MINI = "mini"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ValueSource(str, enum.Enum):
    """Provenance of an overridable field: recomputed each run, or user-entered."""
    AUTO = "auto"
    MANUAL = "manual"


class AuditCategory(str, enum.Enum):
    INPUT = "input"
    GEOMETRY = "geometry"
    VOLUME = "volume"
    PRODUCTION = "production"
    DURATION = "duration"


class CriticalPath(str, enum.Enum):
    MACHINE = "machine"
    HAND = "hand"


# --- Tables ---

class SavedCalculation(Base):
    """Most-recent-N list of saved calculation results."""
    __tablename__ = "saved_calculations"

    id = Column(String, primary_key=True)  # CalculationResult.id
    name = Column(String, nullable=False)  # project name at save time
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    inputs_json = Column(JSON, nullable=False)   # ExcavationInputs snapshot
    results_json = Column(JSON, nullable=False)  # full CalculationResult
