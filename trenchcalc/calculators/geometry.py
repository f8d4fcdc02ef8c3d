"""
Trench geometry resolver.

Fixed order: OD → bedding → bottom width → depth → slope → top width → area.
Overridable fields are recomputed when their source is AUTO and used as
entered when MANUAL. Derived values record a `geometry` entry, manual values
an `input` entry.
"""

import logging

from ..config import settings
from ..models import AuditCategory
from ..reference_data import DEFAULT_SIDE_CLEARANCE_IN, MIN_BEDDING_IN
from ..schemas import ExcavationInputs, GeometryResult
from .audit import AuditSink
from .base import BaseStage
from .reference_lookup import ReferenceLookup

logger = logging.getLogger(__name__)


class GeometryResolver(BaseStage):

    def __init__(self, lookup: ReferenceLookup = None, working_clearance_in: float = None):
        super().__init__(lookup)
        if working_clearance_in is None:
            working_clearance_in = settings.WORKING_CLEARANCE_IN
        self.working_clearance_in = working_clearance_in

    def calculate(self, inputs: ExcavationInputs, sink: AuditSink) -> GeometryResult:
        od = self._resolve_od(inputs, sink)
        bedding_depth = self._bedding_depth(od, sink)
        bottom_width = self._resolve_bottom_width(inputs, od, sink)
        depth = self._resolve_depth(inputs, od, bedding_depth, sink)
        slope_ratio = self._resolve_slope(inputs, sink)

        is_sloped = slope_ratio > 0
        if is_sloped:
            top_width = bottom_width + 2 * depth * slope_ratio
            sink.record(
                AuditCategory.GEOMETRY, "Top Width",
                "Calculated from bottom width, depth, and slope ratio",
                formula=f"{bottom_width:.2f} + ({depth:.2f} × {slope_ratio} × 2)",
                inputs={"bottom_width": bottom_width, "depth": depth, "slope_ratio": slope_ratio},
                result=f"{top_width:.2f} ft",
            )
        else:
            top_width = bottom_width

        if is_sloped:
            area = (bottom_width + top_width) / 2 * depth
            formula = f"(({bottom_width:.2f} + {top_width:.2f}) ÷ 2) × {depth:.2f}"
        else:
            area = bottom_width * depth
            formula = f"{bottom_width:.2f} × {depth:.2f}"
        sink.record(
            AuditCategory.GEOMETRY, "Cross-Section Area",
            "Trapezoidal cross-section" if is_sloped else "Rectangular cross-section",
            formula=formula,
            result=f"{area:.2f} sq ft",
        )

        return GeometryResult(
            bottom_width=bottom_width,
            top_width=top_width,
            depth=depth,
            length=inputs.geometry.length,
            bedding_depth=bedding_depth,
            cross_section_area=area,
            is_sloped=is_sloped,
            od=od,
            slope_ratio=slope_ratio,
        )

    # --- Individual fields ---

    def _resolve_od(self, inputs: ExcavationInputs, sink: AuditSink) -> float:
        pipe = inputs.pipe
        if pipe.od.is_manual:
            sink.record(
                AuditCategory.INPUT, "Pipe OD (Manual)", "OD manually entered",
                inputs={"od": pipe.od.value},
                result=f'{pipe.od.value}"',
            )
            return pipe.od.value

        found = self.lookup.od_from_nps(pipe.nps)
        if not found.found:
            # Non-standard size: the entered OD stands
            logger.info("No OD for NPS %s, keeping entered OD %s", pipe.nps, pipe.od.value)
            sink.record(
                AuditCategory.INPUT, "Pipe OD (Not Listed)",
                f"{found.miss.reason}; using entered OD",
                inputs={"nps": pipe.nps, "od": pipe.od.value},
                result=f'{pipe.od.value}"',
            )
            return pipe.od.value

        sink.record(
            AuditCategory.GEOMETRY, "Pipe OD Lookup",
            f'Auto-calculated OD from NPS {pipe.nps}"',
            formula=f"OD = NPS_TO_OD[{pipe.nps}]",
            inputs={"nps": pipe.nps},
            result=f'{found.value}"',
        )
        return found.value

    def _bedding_depth(self, od: float, sink: AuditSink) -> float:
        bedding_in = max(od / 3, MIN_BEDDING_IN)
        bedding_depth = self.inches_to_feet(bedding_in)
        sink.record(
            AuditCategory.GEOMETRY, "Bedding Depth",
            'Calculated bedding depth using max(OD/3, 4")',
            formula=f'max({od}" ÷ 3, 4") = {bedding_in:.2f}"',
            inputs={"od": od},
            result=f"{bedding_depth:.3f} ft",
        )
        return bedding_depth

    def _resolve_bottom_width(self, inputs: ExcavationInputs, od: float,
                              sink: AuditSink) -> float:
        field = inputs.geometry.bottom_width
        if field.is_manual:
            sink.record(
                AuditCategory.INPUT, "Bottom Width (Manual)", "Bottom width manually entered",
                inputs={"bottom_width": field.value},
                result=f"{field.value:.2f} ft",
            )
            return field.value

        clearance = self.lookup.side_clearance(od).value_or(DEFAULT_SIDE_CLEARANCE_IN)
        bottom_width = self.inches_to_feet(od + 2 * clearance)
        sink.record(
            AuditCategory.GEOMETRY, "Bottom Width",
            "Auto-calculated from OD and clearance rules",
            formula="(OD + 2 × clearance) ÷ 12",
            inputs={"od": od, "clearance": clearance},
            result=f"{bottom_width:.2f} ft",
        )
        return bottom_width

    def _resolve_depth(self, inputs: ExcavationInputs, od: float, bedding_depth: float,
                       sink: AuditSink) -> float:
        field = inputs.geometry.depth
        if field.is_manual:
            sink.record(
                AuditCategory.INPUT, "Trench Depth (Manual)", "Depth manually entered",
                inputs={"depth": field.value},
                result=f"{field.value:.2f} ft",
            )
            return field.value

        cover = inputs.geometry.cover_to_top
        depth = (cover + self.inches_to_feet(od) + bedding_depth
                 + self.inches_to_feet(self.working_clearance_in))
        sink.record(
            AuditCategory.GEOMETRY, "Trench Depth",
            "Auto-calculated from cover + pipe OD + bedding + clearance",
            formula="cover + OD + bedding + working clearance",
            inputs={
                "cover_to_top": cover,
                "od": od,
                "bedding_depth": f"{bedding_depth:.3f}",
                "working_clearance": f'{self.working_clearance_in}"',
            },
            result=f"{depth:.2f} ft",
        )
        return depth

    def _resolve_slope(self, inputs: ExcavationInputs, sink: AuditSink) -> float:
        field = inputs.soil.slope_ratio
        if field.is_manual:
            sink.record(
                AuditCategory.INPUT, "Slope Ratio (Manual)", "Slope ratio manually entered",
                inputs={"slope_ratio": field.value},
                result=f"{field.value}H:1V",
            )
            return field.value

        soil_type = inputs.soil.soil_type
        slope_ratio = self.lookup.slope_ratio(soil_type)
        sink.record(
            AuditCategory.GEOMETRY, "Slope Ratio",
            f"Auto-selected from soil type {soil_type.value}",
            inputs={"soil_type": soil_type.value},
            result=f"{slope_ratio}H:1V",
        )
        return slope_ratio
