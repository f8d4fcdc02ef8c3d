from fastapi import APIRouter, Query
from .. import models
from ..calculators.audit import CATEGORY_ORDER, category_display_name
from ..calculators.reference_lookup import ReferenceLookup
from ..reference_data import (
    AVAILABLE_NPS_SIZES, NPS_TO_OD, SIDE_CLEARANCE_RULES, STANDARD_BUCKETS,
    recommend_excavator_class,
)

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/pipe-sizes")
def list_pipe_sizes():
    """Standard nominal pipe sizes with outside diameter and per-side clearance."""
    lookup = ReferenceLookup()
    return [
        {
            "nps": nps,
            "od": NPS_TO_OD[nps],
            "side_clearance": lookup.side_clearance(NPS_TO_OD[nps]).value,
        }
        for nps in AVAILABLE_NPS_SIZES
    ]


@router.get("/clearance-rules")
def list_clearance_rules():
    # inf isn't valid JSON: open-ended interval goes out as null
    return [
        {**rule, "max_od": None if rule["max_od"] == float("inf") else rule["max_od"]}
        for rule in SIDE_CLEARANCE_RULES
    ]


@router.get("/soil-types")
def list_soil_types():
    lookup = ReferenceLookup()
    return [
        {"soil_type": soil_type.value, **lookup.soil(soil_type)} for soil_type in models.SoilType
    ]


@router.get("/excavators")
def list_excavators():
    lookup = ReferenceLookup()
    return [
        {"excavator_class": excavator_class.value, **lookup.excavator_spec(excavator_class)}
        for excavator_class in models.ExcavatorClass
    ]


@router.get("/excavators/recommend")
def recommend_excavator(trench_width_ft: float = Query(..., gt=0)):
    excavator_class = recommend_excavator_class(trench_width_ft)
    return {
        "trench_width_ft": trench_width_ft,
        "excavator_class": excavator_class.value,
        "name": ReferenceLookup().excavator_spec(excavator_class)["name"],
    }


@router.get("/buckets")
def list_buckets(excavator_class: models.ExcavatorClass):
    buckets = ReferenceLookup().available_buckets(excavator_class)
    return [
        {
            "width": b["width"],
            "capacity": b["capacity"],
            "classes": [c.value for c in b["classes"]],
        }
        for b in buckets
    ]


@router.get("/buckets/capacity")
def get_bucket_capacity(width_in: float = Query(..., gt=0)):
    """Capacity of a bucket width. Non-standard widths get the default mini bucket capacity."""
    return {
        "width_in": width_in,
        "capacity_cy": ReferenceLookup().bucket_capacity(width_in),
        "standard": any(b["width"] == width_in for b in STANDARD_BUCKETS),
    }


@router.get("/production-rates")
def list_production_rates():
    """Machine, hand and vacuum rates keyed by soil type, plus the sawcut rate."""
    lookup = ReferenceLookup()
    return {
        "machine_cy_per_hr": {
            excavator_class.value: {
                soil_type.value: lookup.machine_rate(excavator_class, soil_type)
                for soil_type in models.SoilType
            }
            for excavator_class in models.ExcavatorClass
        },
        "hand_cy_per_hr_per_laborer": {
            soil_type.value: lookup.hand_rate(soil_type) for soil_type in models.SoilType
        },
        "vacuum_cy_per_hr": {
            soil_type.value: lookup.vacuum_rate(soil_type) for soil_type in models.SoilType
        },
        "sawcut_lf_per_hr": lookup.sawcut_rate,
    }


@router.get("/audit-categories")
def list_audit_categories():
    """Audit trail groups in display order."""
    return [
        {
            "category": category.value,
            "order": order,
            "display_name": category_display_name(category),
        }
        for category, order in sorted(CATEGORY_ORDER.items(), key=lambda item: item[1])
    ]
