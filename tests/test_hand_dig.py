"""
Hand dig / machine dig split.

Default geometry: 21.892 sq ft cross-section, 100 ft long, 81.08 CY bank.
"""

import pytest

from trenchcalc.calculators.audit import AuditSink
from trenchcalc.calculators.geometry import GeometryResolver
from trenchcalc.calculators.hand_dig import HandDigSplitter
from trenchcalc.calculators.volume import VolumeCalculator
from trenchcalc.models import (
    AuditCategory, HandDigMethod, HandDigOverrideType, ProximityScenario, SoilType,
)
from trenchcalc.schemas import HandDigOverride

AREA = 21.892361
BANK = AREA * 100 / 27


def _split(inputs, **hand_dig_changes):
    inputs = inputs.model_copy(
        update={"hand_dig": inputs.hand_dig.model_copy(update=hand_dig_changes)})
    geometry = GeometryResolver(working_clearance_in=4.0).calculate(inputs, sink=AuditSink())
    bulk = VolumeCalculator().calculate(geometry, inputs.soil.soil_type, sink=AuditSink())
    sink = AuditSink()
    split = HandDigSplitter().calculate(inputs, geometry, bulk.bank_volume, sink=sink)
    return split, bulk.bank_volume, sink


# ============================================================
# Proximity scenarios
# ============================================================

def test_no_conflict_is_all_machine(inputs):
    split, bank, sink = _split(inputs)
    assert split.hand_dig_volume == 0.0
    assert split.machine_dig_volume == bank
    assert split.machine_dig_percentage == 100.0
    assert split.mode == "no_conflict"
    assert [e.title for e in sink.entries] == [
        "No Utility Conflict", "Hand Dig Method", "Volume Split Summary",
    ]


def test_crossing_hand_digs_zone_plus_buffers(inputs):
    """2 ft zone + 2 × 2 ft buffer = 6 ft of trench by hand."""
    split, bank, _ = _split(inputs, proximity_scenario=ProximityScenario.CROSSING)
    assert split.hand_dig_volume == pytest.approx(AREA * 6 / 27, abs=1e-4)
    assert split.machine_dig_volume == pytest.approx(bank - split.hand_dig_volume)
    assert split.mode == "crossing"


def test_crossing_clamped_to_bank_volume(inputs):
    """A zone longer than the trench can't dig more than the trench holds."""
    split, bank, _ = _split(inputs, proximity_scenario=ProximityScenario.CROSSING,
                            tolerance_zone_width=150.0)
    assert split.hand_dig_volume == bank
    assert split.machine_dig_volume == 0.0


def test_parallel_hand_digs_tolerance_width(inputs):
    split, _, _ = _split(inputs, proximity_scenario=ProximityScenario.PARALLEL,
                         tolerance_zone_width=5.0, buffer_length_each_side=50.0)
    assert split.hand_dig_volume == pytest.approx(AREA * 5 / 27, abs=1e-4)


def test_parallel_limited_to_trench_length(inputs):
    split, bank, _ = _split(inputs, proximity_scenario=ProximityScenario.PARALLEL,
                            tolerance_zone_width=250.0)
    assert split.hand_dig_volume == pytest.approx(bank)


def test_exposure_is_all_hand(inputs):
    """Exposure ignores tolerance and buffer entirely."""
    split, bank, _ = _split(inputs, proximity_scenario=ProximityScenario.EXPOSURE,
                            tolerance_zone_width=0.0, buffer_length_each_side=0.0)
    assert split.hand_dig_volume == bank
    assert split.machine_dig_volume == 0.0
    assert split.hand_dig_percentage == 100.0


# ============================================================
# Manual overrides
# ============================================================

def test_fixed_override_beats_scenario(inputs):
    split, bank, sink = _split(
        inputs, proximity_scenario=ProximityScenario.EXPOSURE,
        override=HandDigOverride(type=HandDigOverrideType.FIXED_CY, value=10.0))
    assert split.hand_dig_volume == 10.0
    assert split.machine_dig_volume == pytest.approx(bank - 10.0)
    assert split.mode == "override_fixed_cy"
    assert sink.entries[0].title == "Hand Dig Override"


def test_fixed_override_clamps_to_bank(inputs):
    split, bank, _ = _split(
        inputs, override=HandDigOverride(type=HandDigOverrideType.FIXED_CY, value=500.0))
    assert split.hand_dig_volume == bank
    assert split.machine_dig_volume == 0.0


def test_percentage_override(inputs):
    split, bank, _ = _split(
        inputs, override=HandDigOverride(type=HandDigOverrideType.PERCENTAGE, value=25.0))
    assert split.hand_dig_volume == pytest.approx(bank * 0.25)
    assert split.hand_dig_percentage == pytest.approx(25.0)
    assert split.machine_dig_percentage == pytest.approx(75.0)


def test_percentage_override_is_not_clamped(inputs):
    """Over 100% is passed through; machine volume goes negative."""
    split, bank, _ = _split(
        inputs, override=HandDigOverride(type=HandDigOverrideType.PERCENTAGE, value=150.0))
    assert split.hand_dig_volume == pytest.approx(bank * 1.5)
    assert split.machine_dig_volume == pytest.approx(-bank * 0.5)
    assert split.hand_dig_volume + split.machine_dig_volume == pytest.approx(bank)


# ============================================================
# Invariants and audit
# ============================================================

@pytest.mark.parametrize("scenario", list(ProximityScenario))
@pytest.mark.parametrize("soil_type", list(SoilType))
def test_split_sums_to_bank_volume(inputs, scenario, soil_type):
    inputs = inputs.model_copy(
        update={"soil": inputs.soil.model_copy(update={"soil_type": soil_type})})
    split, bank, _ = _split(inputs, proximity_scenario=scenario)
    assert split.machine_dig_volume + split.hand_dig_volume == pytest.approx(bank)
    assert 0 <= split.hand_dig_volume <= bank


def test_zero_bank_volume_gives_zero_percentages(inputs):
    from trenchcalc.schemas import GeometryResult
    geometry = GeometryResult(
        bottom_width=1.0, top_width=1.0, depth=1.0, length=0.0, bedding_depth=0.33,
        cross_section_area=1.0, is_sloped=False, od=4.5, slope_ratio=0.0,
    )
    split = HandDigSplitter().calculate(inputs, geometry, 0.0, sink=AuditSink())
    assert split.hand_dig_percentage == 0.0
    assert split.machine_dig_percentage == 0.0


def test_method_entry_reports_vacuum(inputs):
    _, _, sink = _split(inputs, method=HandDigMethod.VACUUM)
    method = [e for e in sink.entries if e.title == "Hand Dig Method"][0]
    assert method.result == "vacuum"
    assert all(e.category == AuditCategory.VOLUME for e in sink.entries)
