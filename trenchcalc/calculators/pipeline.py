"""
Calculation pipeline: runs the stages in order and assembles the result.

    inputs → validate → geometry → volume → hand dig split → production
           → duration & summaries → CalculationResult (sorted audit trail)

All or nothing: either every stage completes and a full result comes back,
or nothing does.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable

from ..schemas import (
    CalculationOutcome, CalculationResult, ExcavationInputs, VolumeResult,
)
from .audit import AuditSink, record_input_entries, sort_audit_entries
from .duration import DurationCalculator
from .geometry import GeometryResolver
from .hand_dig import HandDigSplitter
from .production import ProductionCalculator
from .reference_lookup import ReferenceLookup
from .validation import validate_inputs
from .volume import VolumeCalculator

logger = logging.getLogger(__name__)


class CalculationFailed(Exception):
    """An unexpected error inside a stage. No partial result is produced."""


class ExcavationPipeline:
    """Holds the stage instances; one pipeline can run any number of times."""

    def __init__(self, lookup: ReferenceLookup = None, working_clearance_in: float = None):
        self.lookup = lookup or ReferenceLookup()
        self.geometry = GeometryResolver(self.lookup, working_clearance_in)
        self.volume = VolumeCalculator(self.lookup)
        self.hand_dig = HandDigSplitter(self.lookup)
        self.production = ProductionCalculator(self.lookup)
        self.duration = DurationCalculator(self.lookup)

    def run(self, inputs: ExcavationInputs,
            clock: Callable[[], datetime] = None) -> CalculationResult:
        """Run every stage without validating. Exceptions propagate."""
        clock = clock or datetime.utcnow
        sink = AuditSink(clock)
        timestamp = clock()

        record_input_entries(inputs, sink)
        geometry = self.geometry.calculate(inputs, sink=sink)
        bulk = self.volume.calculate(geometry, inputs.soil.soil_type, sink=sink)
        split = self.hand_dig.calculate(inputs, geometry, bulk.bank_volume, sink=sink)
        production = self.production.calculate(inputs, split, sink=sink)
        schedule = self.duration.calculate(inputs, production, sink=sink)

        volume = VolumeResult(
            bank_volume=bulk.bank_volume,
            loose_volume=bulk.loose_volume,
            swell_factor=bulk.swell_factor,
            machine_dig_volume=split.machine_dig_volume,
            hand_dig_volume=split.hand_dig_volume,
        )
        result = CalculationResult(
            id=f"calc-{uuid.uuid4().hex}",
            timestamp=timestamp,
            inputs=inputs,
            geometry=geometry,
            volume=volume,
            hand_dig=split,
            production=production,
            duration=schedule.duration,
            crew_summary=schedule.crew_summary,
            equipment_summary=schedule.equipment_summary,
            audit_trail=sort_audit_entries(sink.entries),
        )
        logger.info(
            "Calculated %s: %.2f CY bank (%.2f hand), %.2f workdays, %s critical, %d audit entries",
            inputs.project_name, volume.bank_volume, volume.hand_dig_volume,
            result.duration.total_duration, result.duration.critical_path.value,
            len(result.audit_trail),
        )
        return result

    def calculate(self, inputs: ExcavationInputs,
                  clock: Callable[[], datetime] = None) -> CalculationOutcome:
        """
        Validate, then run. Invalid inputs come back as an error map and no
        stage runs; an unexpected stage failure raises CalculationFailed.
        """
        errors = validate_inputs(inputs)
        if errors:
            logger.info("Validation failed for %s: %s", inputs.project_name, sorted(errors))
            return CalculationOutcome(errors=errors)

        try:
            result = self.run(inputs, clock)
        except Exception as e:
            logger.exception("Calculation failed for %s", inputs.project_name)
            raise CalculationFailed("Calculation failed") from e
        return CalculationOutcome(result=result)


def perform_calculation(inputs: ExcavationInputs,
                        clock: Callable[[], datetime] = None) -> CalculationResult:
    """Run the full pipeline on already-validated inputs."""
    return ExcavationPipeline().run(inputs, clock)


def calculate(inputs: ExcavationInputs,
              clock: Callable[[], datetime] = None) -> CalculationOutcome:
    """Validate and run with the default reference tables."""
    return ExcavationPipeline().calculate(inputs, clock)
