"""
Geometry resolver and volume calculator.

Default inputs: NPS 4 (OD 4.5"), 100 ft, 3 ft cover, type B soil.
    bedding     = max(4.5/3, 4)" = 4" = 0.333 ft
    bottom      = (4.5 + 2 × 6) / 12 = 1.375 ft
    depth       = 3 + 0.375 + 0.333 + 0.333 = 4.0417 ft
    top         = 1.375 + 2 × 4.0417 × 1.0 = 9.4583 ft
    area        = (1.375 + 9.4583) / 2 × 4.0417 = 21.892 sq ft
    bank volume = 21.892 × 100 / 27 = 81.08 CY
"""

import pytest

from trenchcalc.calculators.audit import AuditSink
from trenchcalc.calculators.geometry import GeometryResolver
from trenchcalc.calculators.volume import VolumeCalculator
from trenchcalc.models import AuditCategory, SoilType
from trenchcalc.schemas import Overridable


def _with(inputs, section, **changes):
    """Copy of inputs with fields of one section replaced."""
    part = getattr(inputs, section).model_copy(update=changes)
    return inputs.model_copy(update={section: part})


def _titles(sink, category=None):
    return [e.title for e in sink.entries if category is None or e.category == category]


# ============================================================
# Geometry: auto path
# ============================================================

def test_default_geometry(inputs):
    """Default scenario resolves every field automatically."""
    sink = AuditSink()
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(inputs, sink=sink)
    assert geometry.od == 4.5
    assert geometry.bedding_depth == pytest.approx(4 / 12)
    assert geometry.bottom_width == pytest.approx(1.375)
    assert geometry.depth == pytest.approx(4.041667, abs=1e-5)
    assert geometry.slope_ratio == 1.0
    assert geometry.is_sloped
    assert geometry.top_width == pytest.approx(9.458333, abs=1e-5)
    assert geometry.cross_section_area == pytest.approx(21.892361, abs=1e-5)
    assert geometry.length == 100.0


def test_auto_fields_ignore_stale_values(inputs):
    """AUTO values stored on the inputs are placeholders, never used."""
    stale = _with(inputs, "geometry", depth=Overridable.auto(99.0),
                  bottom_width=Overridable.auto(50.0))
    stale = _with(stale, "pipe", od=Overridable.auto(30.0))
    resolver = GeometryResolver(working_clearance_in=4.0)
    a = resolver.calculate(inputs, sink=AuditSink())
    b = resolver.calculate(stale, sink=AuditSink())
    assert a == b


def test_auto_geometry_records_geometry_entries(inputs):
    sink = AuditSink()
    GeometryResolver(working_clearance_in=4.0).calculate(inputs, sink=sink)
    assert _titles(sink, AuditCategory.INPUT) == []
    assert _titles(sink, AuditCategory.GEOMETRY) == [
        "Pipe OD Lookup", "Bedding Depth", "Bottom Width", "Trench Depth",
        "Slope Ratio", "Top Width", "Cross-Section Area",
    ]


def test_bedding_uses_one_third_od_for_large_pipe(inputs):
    """24" pipe: 24/3 = 8" beats the 4" minimum; clearance 18" per side."""
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(
        _with(inputs, "pipe", nps=24), sink=AuditSink())
    assert geometry.od == 24.0
    assert geometry.bedding_depth == pytest.approx(8 / 12)
    assert geometry.bottom_width == pytest.approx((24 + 36) / 12)


def test_working_clearance_is_configurable(inputs):
    base = GeometryResolver(working_clearance_in=4.0).calculate(inputs, sink=AuditSink())
    deeper = GeometryResolver(working_clearance_in=16.0).calculate(inputs, sink=AuditSink())
    assert deeper.depth - base.depth == pytest.approx(1.0)


def test_unlisted_nps_keeps_entered_od(inputs):
    """NPS 7 isn't in the table: the entered OD stands, recorded as an input."""
    odd = _with(inputs, "pipe", nps=7, od=Overridable.auto(7.1))
    sink = AuditSink()
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(odd, sink=sink)
    assert geometry.od == 7.1
    assert geometry.bottom_width == pytest.approx((7.1 + 18) / 12)
    assert "Pipe OD (Not Listed)" in _titles(sink, AuditCategory.INPUT)


# ============================================================
# Geometry: manual overrides
# ============================================================

def test_manual_overrides_used_as_entered(inputs):
    manual = _with(inputs, "pipe", od=Overridable.manual(5.0))
    manual = _with(manual, "geometry", depth=Overridable.manual(6.0),
                   bottom_width=Overridable.manual(3.0))
    manual = _with(manual, "soil", slope_ratio=Overridable.manual(0.5))
    sink = AuditSink()
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(manual, sink=sink)
    assert geometry.od == 5.0
    assert geometry.depth == 6.0
    assert geometry.bottom_width == 3.0
    assert geometry.slope_ratio == 0.5
    assert geometry.top_width == pytest.approx(3.0 + 2 * 6.0 * 0.5)
    assert _titles(sink, AuditCategory.INPUT) == [
        "Pipe OD (Manual)", "Bottom Width (Manual)", "Trench Depth (Manual)",
        "Slope Ratio (Manual)",
    ]


def test_zero_slope_is_vertical_walls(inputs):
    """Slope 0 → rectangle, top width equals bottom width, no top width entry."""
    vertical = _with(inputs, "geometry", depth=Overridable.manual(6.0),
                     bottom_width=Overridable.manual(3.0))
    vertical = _with(vertical, "soil", slope_ratio=Overridable.manual(0.0))
    sink = AuditSink()
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(vertical, sink=sink)
    assert not geometry.is_sloped
    assert geometry.top_width == 3.0
    assert geometry.cross_section_area == 18.0
    assert "Top Width" not in _titles(sink)


def test_stable_rock_auto_slope_is_vertical(inputs):
    rock = _with(inputs, "soil", soil_type=SoilType.STABLE_ROCK)
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(rock, sink=AuditSink())
    assert geometry.slope_ratio == 0.0
    assert geometry.top_width == geometry.bottom_width


# ============================================================
# Volume
# ============================================================

def test_default_volumes(inputs):
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(inputs, sink=AuditSink())
    sink = AuditSink()
    bulk = VolumeCalculator().calculate(geometry, SoilType.TYPE_B, sink=sink)
    assert bulk.bank_volume == pytest.approx(81.0828, abs=1e-3)
    assert bulk.swell_factor == 0.25
    assert bulk.loose_volume == bulk.bank_volume * 1.25
    assert _titles(sink) == ["Bank Volume", "Swell Factor", "Loose Volume"]
    assert all(e.category == AuditCategory.VOLUME for e in sink.entries)


def test_volume_uses_27_cubic_feet_per_yard(inputs):
    """18 sq ft × 100 ft = 1800 cf = 66.67 CY."""
    vertical = _with(inputs, "geometry", depth=Overridable.manual(6.0),
                     bottom_width=Overridable.manual(3.0))
    vertical = _with(vertical, "soil", soil_type=SoilType.STABLE_ROCK)
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(vertical, sink=AuditSink())
    bulk = VolumeCalculator().calculate(geometry, SoilType.STABLE_ROCK, sink=AuditSink())
    assert bulk.bank_volume == pytest.approx(1800 / 27)
    assert bulk.loose_volume == bulk.bank_volume * 1.5


def test_stage_unit_helpers():
    stage = VolumeCalculator()
    assert stage.inches_to_feet(18.0) == 1.5
    assert stage.cubic_feet_to_cy(54.0) == 2.0
    assert stage.safe_divide(10.0, 4.0) == 2.5
    assert stage.safe_divide(10.0, 0.0) == 0.0
    assert not hasattr(stage, "feet_to_inches")
