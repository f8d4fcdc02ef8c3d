"""Bank and loose volume from the resolved cross-section."""

from ..models import AuditCategory, SoilType
from ..schemas import BulkVolume, GeometryResult
from .audit import AuditSink
from .base import BaseStage


class VolumeCalculator(BaseStage):

    def calculate(self, geometry: GeometryResult, soil_type: SoilType,
                  sink: AuditSink) -> BulkVolume:
        bank_volume = self.cubic_feet_to_cy(geometry.cross_section_area * geometry.length)
        sink.record(
            AuditCategory.VOLUME, "Bank Volume", "Total in-place excavation volume",
            formula=f"{geometry.cross_section_area:.2f} sq ft × {geometry.length} ft ÷ 27",
            inputs={
                "cross_section_area": f"{geometry.cross_section_area:.2f} sq ft",
                "length": f"{geometry.length} ft",
            },
            result=f"{bank_volume:.2f} CY",
        )

        swell_factor = self.lookup.swell_factor(soil_type)
        sink.record(
            AuditCategory.VOLUME, "Swell Factor",
            f"Swell factor for {soil_type.value.replace('_', ' ')} soil",
            result=f"{swell_factor * 100:.0f}%",
        )

        loose_volume = bank_volume * (1 + swell_factor)
        sink.record(
            AuditCategory.VOLUME, "Loose Volume", "Volume after excavation (swelled)",
            formula=f"{bank_volume:.2f} CY × (1 + {swell_factor})",
            inputs={
                "bank_volume": f"{bank_volume:.2f} CY",
                "swell_factor": f"{swell_factor * 100:.0f}%",
            },
            result=f"{loose_volume:.2f} CY",
        )

        return BulkVolume(
            bank_volume=bank_volume,
            loose_volume=loose_volume,
            swell_factor=swell_factor,
        )
