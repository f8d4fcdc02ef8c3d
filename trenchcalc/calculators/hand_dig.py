"""
Hand dig vs machine dig split.

A manual override (fixed CY or percentage of bank volume) takes precedence
over the proximity scenario rules:

    no_conflict  all machine
    crossing     hand dig the tolerance zone plus a buffer each side
    parallel     hand dig a strip as long as the tolerance width
    exposure     all hand

Percentage overrides are deliberately not clamped to 0..100.
"""

import logging

from ..models import AuditCategory, HandDigMethod, HandDigOverrideType, ProximityScenario
from ..schemas import ExcavationInputs, GeometryResult, HandDigSplit
from .audit import AuditSink
from .base import BaseStage

logger = logging.getLogger(__name__)


class HandDigSplitter(BaseStage):

    def calculate(self, inputs: ExcavationInputs, geometry: GeometryResult,
                  bank_volume: float, sink: AuditSink) -> HandDigSplit:
        hand_dig = inputs.hand_dig
        if hand_dig.override is not None:
            hand_volume, mode = self._apply_override(hand_dig.override, bank_volume, sink)
        else:
            hand_volume = self._scenario_volume(inputs, geometry, bank_volume, sink)
            mode = hand_dig.proximity_scenario.value
        machine_volume = bank_volume - hand_volume

        if hand_dig.method == HandDigMethod.VACUUM:
            method_desc = "Using vacuum excavation"
        else:
            method_desc = "Using hand tools"
        sink.record(AuditCategory.VOLUME, "Hand Dig Method", method_desc,
                    result=hand_dig.method.value)

        hand_pct = self.safe_divide(hand_volume, bank_volume) * 100
        machine_pct = self.safe_divide(machine_volume, bank_volume) * 100
        sink.record(
            AuditCategory.VOLUME, "Volume Split Summary", "Machine vs hand dig volume breakdown",
            inputs={"total_volume": f"{bank_volume:.2f} CY"},
            result=f"Machine: {machine_pct:.1f}% | Hand: {hand_pct:.1f}%",
        )

        return HandDigSplit(
            hand_dig_volume=hand_volume,
            machine_dig_volume=machine_volume,
            hand_dig_percentage=hand_pct,
            machine_dig_percentage=machine_pct,
            mode=mode,
        )

    def _apply_override(self, override, bank_volume: float, sink: AuditSink):
        if override.type == HandDigOverrideType.FIXED_CY:
            hand_volume = min(override.value, bank_volume)
            sink.record(
                AuditCategory.VOLUME, "Hand Dig Override", "Fixed cubic yards override applied",
                inputs={"override_value": override.value},
                result=f"{hand_volume:.2f} CY",
            )
            return hand_volume, "override_fixed_cy"

        hand_volume = bank_volume * override.value / 100
        if not 0 <= override.value <= 100:
            logger.warning("Hand dig percentage override %s is outside 0-100", override.value)
        sink.record(
            AuditCategory.VOLUME, "Hand Dig Override", "Percentage override applied",
            inputs={"override_percentage": override.value},
            result=f"{hand_volume:.2f} CY ({override.value}%)",
        )
        return hand_volume, "override_percentage"

    def _scenario_volume(self, inputs: ExcavationInputs, geometry: GeometryResult,
                         bank_volume: float, sink: AuditSink) -> float:
        hand_dig = inputs.hand_dig
        scenario = hand_dig.proximity_scenario

        if scenario == ProximityScenario.CROSSING:
            zone_length = hand_dig.tolerance_zone_width + 2 * hand_dig.buffer_length_each_side
            hand_volume = min(
                self.cubic_feet_to_cy(geometry.cross_section_area * zone_length), bank_volume)
            sink.record(
                AuditCategory.VOLUME, "Utility Crossing", "Tolerance zone hand dig required",
                formula=(f"Zone length = {hand_dig.tolerance_zone_width} + "
                         f"(2 × {hand_dig.buffer_length_each_side}) = {zone_length} ft"),
                inputs={
                    "tolerance_width": hand_dig.tolerance_zone_width,
                    "buffer_length": hand_dig.buffer_length_each_side,
                },
                result=f"Hand dig: {hand_volume:.2f} CY",
            )
            return hand_volume

        if scenario == ProximityScenario.PARALLEL:
            strip_length = min(hand_dig.tolerance_zone_width, geometry.length)
            hand_volume = min(
                self.cubic_feet_to_cy(geometry.cross_section_area * strip_length), bank_volume)
            sink.record(
                AuditCategory.VOLUME, "Parallel Utility",
                "Parallel tolerance zone hand dig required",
                inputs={
                    "tolerance_width": hand_dig.tolerance_zone_width,
                    "trench_length": geometry.length,
                },
                result=f"Hand dig: {hand_volume:.2f} CY",
            )
            return hand_volume

        if scenario == ProximityScenario.EXPOSURE:
            sink.record(
                AuditCategory.VOLUME, "Utility Exposure", "100% hand dig for utility exposure",
                result=f"Hand dig: {bank_volume:.2f} CY",
            )
            return bank_volume

        sink.record(
            AuditCategory.VOLUME, "No Utility Conflict", "100% machine excavation",
            result=f"Machine: {bank_volume:.2f} CY",
        )
        return 0.0
