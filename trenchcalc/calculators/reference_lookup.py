"""
Reference table lookups used by the calculation stages.

Soil, rate and excavator lookups are total over their enum domains.
The NPS→OD and side-clearance tables can miss; those return a LookupResult
so the caller decides the fallback (keep the entered OD, default clearance)
instead of the table hiding it.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from ..models import SoilType, ExcavatorClass
from ..reference_data import (
    NPS_TO_OD,
    SIDE_CLEARANCE_RULES,
    SOIL_TYPES,
    MACHINE_PRODUCTION_RATES,
    HAND_PRODUCTION_RATES,
    VACUUM_PRODUCTION_RATES,
    SAWCUT_RATE,
    EXCAVATOR_SPECS,
    STANDARD_BUCKETS,
    DEFAULT_BUCKET_CAPACITY_CY,
)

logger = logging.getLogger(__name__)


class LookupMiss(BaseModel):
    table: str
    key: float
    reason: str


class LookupResult(BaseModel):
    """A table hit (value) or an explicit miss."""
    value: Optional[float] = None
    miss: Optional[LookupMiss] = None

    @property
    def found(self) -> bool:
        return self.miss is None

    def value_or(self, fallback: float) -> float:
        return self.value if self.found else fallback

    @classmethod
    def hit(cls, value: float) -> "LookupResult":
        return cls(value=value)

    @classmethod
    def missed(cls, table: str, key: float, reason: str) -> "LookupResult":
        return cls(miss=LookupMiss(table=table, key=key, reason=reason))


class ReferenceLookup:
    """
    Wraps the reference tables so stages don't need to know where numbers
    come from. Rate tables can be swapped per instance (what-if scenarios).
    """

    def __init__(self, machine_rates: dict = None, hand_rates: dict = None,
                 vacuum_rates: dict = None, sawcut_rate: float = None):
        self.machine_rates = MACHINE_PRODUCTION_RATES if machine_rates is None else machine_rates
        self.hand_rates = HAND_PRODUCTION_RATES if hand_rates is None else hand_rates
        self.vacuum_rates = VACUUM_PRODUCTION_RATES if vacuum_rates is None else vacuum_rates
        self.sawcut_rate = SAWCUT_RATE if sawcut_rate is None else sawcut_rate

    # --- Pipe ---

    def od_from_nps(self, nps: float) -> LookupResult:
        """Outside diameter (inches) for a standard nominal pipe size."""
        od = NPS_TO_OD.get(nps)
        if od is None:
            logger.debug("NPS %s not in pipe table", nps)
            return LookupResult.missed("nps_to_od", nps, f'NPS {nps}" is not a listed size')
        return LookupResult.hit(od)

    def side_clearance(self, od: float) -> LookupResult:
        """Per-side clearance (inches): first [min_od, max_od) interval containing OD."""
        for rule in SIDE_CLEARANCE_RULES:
            if rule["min_od"] <= od < rule["max_od"]:
                return LookupResult.hit(rule["clearance"])
        return LookupResult.missed("side_clearance", od, f'OD {od}" matches no clearance rule')

    # --- Soil ---

    def soil(self, soil_type: SoilType) -> dict:
        return SOIL_TYPES[soil_type]

    def slope_ratio(self, soil_type: SoilType) -> float:
        return SOIL_TYPES[soil_type]["slope_ratio"]

    def swell_factor(self, soil_type: SoilType) -> float:
        return SOIL_TYPES[soil_type]["swell_factor"]

    # --- Production rates ---

    def machine_rate(self, excavator_class: ExcavatorClass, soil_type: SoilType) -> float:
        """CY/hr for an excavator class in a soil type."""
        return self.machine_rates[excavator_class][soil_type]

    def hand_rate(self, soil_type: SoilType) -> float:
        """CY/hr per laborer."""
        return self.hand_rates[soil_type]

    def vacuum_rate(self, soil_type: SoilType) -> float:
        """CY/hr per vacuum truck."""
        return self.vacuum_rates[soil_type]

    # --- Equipment ---

    def excavator_spec(self, excavator_class: ExcavatorClass) -> dict:
        return EXCAVATOR_SPECS[excavator_class]

    def available_buckets(self, excavator_class: ExcavatorClass) -> list:
        """Standard buckets an excavator class can carry."""
        return [b for b in STANDARD_BUCKETS if excavator_class in b["classes"]]

    def bucket_capacity(self, width_in: float) -> float:
        """Bucket capacity (CY) for a standard width, mini bucket capacity if not standard."""
        for bucket in STANDARD_BUCKETS:
            if bucket["width"] == width_in:
                return bucket["capacity"]
        return DEFAULT_BUCKET_CAPACITY_CY
