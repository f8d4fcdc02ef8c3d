"""
Production hours from the volume split.

Machine hours come from the excavator/soil rate table. Hand-dig volume is
dug either by vacuum truck (vacuum method AND a truck on site) or by the
laborers with hand tools. Sawcut hours are added when sawcutting is on.

Note: total labor hours counts laborer hours on hand dig plus the machine
hours (laborers support the machine). Kept as is for now.
"""

import logging

from ..models import AuditCategory, HandDigMethod
from ..schemas import ExcavationInputs, HandDigSplit, ProductionResult
from .audit import AuditSink
from .base import BaseStage

logger = logging.getLogger(__name__)


class ProductionCalculator(BaseStage):

    def calculate(self, inputs: ExcavationInputs, split: HandDigSplit,
                  sink: AuditSink) -> ProductionResult:
        soil_type = inputs.soil.soil_type
        equipment = inputs.equipment
        laborers = inputs.crew.laborers

        machine_rate = self.lookup.machine_rate(equipment.excavator_class, soil_type)
        sink.record(
            AuditCategory.PRODUCTION, "Machine Production Rate",
            f"{equipment.excavator_class.value} excavator in {soil_type.value} soil",
            inputs={"excavator_class": equipment.excavator_class.value,
                    "soil_type": soil_type.value},
            result=f"{machine_rate} CY/hr",
        )

        machine_hours = self.safe_divide(split.machine_dig_volume, machine_rate)
        sink.record(
            AuditCategory.PRODUCTION, "Machine Hours", "Hours for machine excavation",
            formula=f"{split.machine_dig_volume:.2f} CY ÷ {machine_rate} CY/hr",
            inputs={
                "machine_volume": f"{split.machine_dig_volume:.2f} CY",
                "machine_rate": f"{machine_rate} CY/hr",
            },
            result=f"{machine_hours:.2f} hrs",
        )

        hand_rate = self.lookup.hand_rate(soil_type)
        vacuum_rate = self.lookup.vacuum_rate(soil_type)
        hand_hours = 0.0
        vacuum_hours = 0.0

        if split.hand_dig_volume > 0:
            if inputs.hand_dig.method == HandDigMethod.VACUUM and equipment.use_vacuum_truck:
                vacuum_hours = self.safe_divide(split.hand_dig_volume, vacuum_rate)
                sink.record(
                    AuditCategory.PRODUCTION, "Vacuum Excavation Hours",
                    "Hours for vacuum excavation",
                    formula=f"{split.hand_dig_volume:.2f} CY ÷ {vacuum_rate} CY/hr",
                    inputs={
                        "hand_volume": f"{split.hand_dig_volume:.2f} CY",
                        "vacuum_rate": f"{vacuum_rate} CY/hr",
                    },
                    result=f"{vacuum_hours:.2f} hrs",
                )
            else:
                if inputs.hand_dig.method == HandDigMethod.VACUUM:
                    logger.info("Vacuum method selected without a vacuum truck, using hand tools")
                crew_rate = hand_rate * laborers
                sink.record(
                    AuditCategory.PRODUCTION, "Hand Excavation Rate",
                    f"{laborers} laborers in {soil_type.value} soil",
                    formula=f"{hand_rate} CY/hr/laborer × {laborers} laborers",
                    inputs={"rate_per_laborer": f"{hand_rate} CY/hr", "laborers": laborers},
                    result=f"{crew_rate:.2f} CY/hr",
                )
                hand_hours = self.safe_divide(split.hand_dig_volume, crew_rate)
                sink.record(
                    AuditCategory.PRODUCTION, "Hand Excavation Hours",
                    "Hours for hand excavation",
                    formula=f"{split.hand_dig_volume:.2f} CY ÷ {crew_rate:.2f} CY/hr",
                    inputs={
                        "hand_volume": f"{split.hand_dig_volume:.2f} CY",
                        "total_hand_rate": f"{crew_rate:.2f} CY/hr",
                    },
                    result=f"{hand_hours:.2f} hrs",
                )

        sawcut_hours = 0.0
        if equipment.use_sawcut and equipment.sawcut_length > 0:
            sawcut_rate = self.lookup.sawcut_rate
            sawcut_hours = self.safe_divide(equipment.sawcut_length, sawcut_rate)
            sink.record(
                AuditCategory.PRODUCTION, "Sawcut Hours", "Hours for sawcutting pavement",
                formula=f"{equipment.sawcut_length} LF ÷ {sawcut_rate} LF/hr",
                inputs={
                    "sawcut_length": f"{equipment.sawcut_length} LF",
                    "sawcut_rate": f"{sawcut_rate} LF/hr",
                },
                result=f"{sawcut_hours:.2f} hrs",
            )

        total_equipment_hours = machine_hours + vacuum_hours + sawcut_hours
        total_labor_hours = hand_hours * laborers + machine_hours
        sink.record(
            AuditCategory.PRODUCTION, "Production Summary", "Total hours breakdown",
            result=(f"Equipment: {total_equipment_hours:.2f} hrs | "
                    f"Labor: {total_labor_hours:.2f} hrs"),
        )

        return ProductionResult(
            machine_rate=machine_rate,
            hand_rate=hand_rate,
            vacuum_rate=vacuum_rate,
            machine_hours=machine_hours,
            hand_hours=hand_hours,
            sawcut_hours=sawcut_hours,
            vacuum_hours=vacuum_hours,
            total_equipment_hours=total_equipment_hours,
            total_labor_hours=total_labor_hours,
        )
