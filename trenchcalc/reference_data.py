# Excavation reference data: pipe dimensions (ASME B36.10 steel pipe),
# OSHA 1926 Subpart P soil classes, and typical production rates.

import math

from .models import SoilType, ExcavatorClass

# NPS (inches) → outside diameter (inches)
NPS_TO_OD = {
    0.5: 0.84,
    0.75: 1.05,
    1: 1.315,
    1.25: 1.66,
    1.5: 1.9,
    2: 2.375,
    2.5: 2.875,
    3: 3.5,
    3.5: 4.0,
    4: 4.5,
    5: 5.563,
    6: 6.625,
    8: 8.625,
    10: 10.75,
    12: 12.75,
    # 14" and up: OD equals NPS
    14: 14.0,
    16: 16.0,
    18: 18.0,
    20: 20.0,
    22: 22.0,
    24: 24.0,
    26: 26.0,
    28: 28.0,
    30: 30.0,
    32: 32.0,
    34: 34.0,
    36: 36.0,
    42: 42.0,
    48: 48.0,
}

AVAILABLE_NPS_SIZES = sorted(NPS_TO_OD)

# Per-side clearance by OD: half-open [min_od, max_od) intervals, inches
SIDE_CLEARANCE_RULES = [
    {"min_od": 0.0, "max_od": 6.0, "clearance": 6.0},
    {"min_od": 6.0, "max_od": 12.0, "clearance": 9.0},
    {"min_od": 12.0, "max_od": 24.0, "clearance": 12.0},
    {"min_od": 24.0, "max_od": 36.0, "clearance": 18.0},
    {"min_od": 36.0, "max_od": math.inf, "clearance": 24.0},
]

DEFAULT_SIDE_CLEARANCE_IN = 12.0

# Bedding: max(OD / 3, 4")
MIN_BEDDING_IN = 4.0

# Cubic feet per cubic yard
CUBIC_FEET_PER_CY = 27.0

# Soil classes: slope is H:V, swell is fractional bulking, unit weight in pcf
SOIL_TYPES = {
    SoilType.STABLE_ROCK: {
        "name": "Stable Rock",
        "description": "Natural solid mineral material that can be excavated with vertical sides",
        "slope_ratio": 0.0,
        "swell_factor": 0.50,
        "unit_weight_pcf": 165,
        "cohesion": "high",
    },
    SoilType.TYPE_A: {
        "name": "Type A",
        "description": "Cohesive soil with unconfined compressive strength of 1.5 tsf or greater",
        "slope_ratio": 0.75,
        "swell_factor": 0.25,
        "unit_weight_pcf": 130,
        "cohesion": "high",
    },
    SoilType.TYPE_B: {
        "name": "Type B",
        "description": "Cohesive soil with unconfined compressive strength between 0.5 and 1.5 tsf",
        "slope_ratio": 1.0,
        "swell_factor": 0.25,
        "unit_weight_pcf": 120,
        "cohesion": "medium",
    },
    SoilType.TYPE_C: {
        "name": "Type C",
        "description": "Cohesive soil with unconfined compressive strength of 0.5 tsf or less, or granular soils",
        "slope_ratio": 1.5,
        "swell_factor": 0.30,
        "unit_weight_pcf": 110,
        "cohesion": "low",
    },
}

# Machine production: CY/hr by excavator class × soil
MACHINE_PRODUCTION_RATES = {
    ExcavatorClass.MICRO: {
        SoilType.STABLE_ROCK: 3.0, SoilType.TYPE_A: 8.0,
        SoilType.TYPE_B: 10.0, SoilType.TYPE_C: 12.0,
    },
    ExcavatorClass.MINI: {
        SoilType.STABLE_ROCK: 6.0, SoilType.TYPE_A: 15.0,
        SoilType.TYPE_B: 20.0, SoilType.TYPE_C: 25.0,
    },
    ExcavatorClass.SMALL: {
        SoilType.STABLE_ROCK: 10.0, SoilType.TYPE_A: 25.0,
        SoilType.TYPE_B: 35.0, SoilType.TYPE_C: 45.0,
    },
    ExcavatorClass.MEDIUM: {
        SoilType.STABLE_ROCK: 15.0, SoilType.TYPE_A: 40.0,
        SoilType.TYPE_B: 55.0, SoilType.TYPE_C: 70.0,
    },
    ExcavatorClass.LARGE: {
        SoilType.STABLE_ROCK: 25.0, SoilType.TYPE_A: 60.0,
        SoilType.TYPE_B: 80.0, SoilType.TYPE_C: 100.0,
    },
}

# Hand excavation: CY/hr per laborer
HAND_PRODUCTION_RATES = {
    SoilType.STABLE_ROCK: 0.1,  # essentially breaking, very slow
    SoilType.TYPE_A: 0.3,
    SoilType.TYPE_B: 0.4,
    SoilType.TYPE_C: 0.5,
}

# Vacuum excavation: CY/hr per truck
VACUUM_PRODUCTION_RATES = {
    SoilType.STABLE_ROCK: 2.0,
    SoilType.TYPE_A: 5.0,
    SoilType.TYPE_B: 7.0,
    SoilType.TYPE_C: 10.0,
}

# Pavement sawcut: LF/hr
SAWCUT_RATE = 100.0

EXCAVATOR_SPECS = {
    ExcavatorClass.MICRO: {
        "name": "Micro Excavator",
        "description": "Compact excavator for tight spaces and light work",
        "operating_weight_lbs": (2000, 4000),
        "bucket_width_in": (12, 18),
        "bucket_capacity_cy": (0.02, 0.06),
        "max_dig_depth_ft": 6,
        "reach_at_ground_ft": 10,
        "typical_applications": [
            "Interior demolition", "Backyard excavation", "Narrow trenches", "Landscaping",
        ],
    },
    ExcavatorClass.MINI: {
        "name": "Mini Excavator",
        "description": "Versatile compact excavator for residential and light commercial",
        "operating_weight_lbs": (4000, 12000),
        "bucket_width_in": (18, 30),
        "bucket_capacity_cy": (0.06, 0.2),
        "max_dig_depth_ft": 10,
        "reach_at_ground_ft": 15,
        "typical_applications": [
            "Utility trenches", "Foundation work", "Pipe installation", "Small site preparation",
        ],
    },
    ExcavatorClass.SMALL: {
        "name": "Small Excavator",
        "description": "Mid-size excavator for commercial and utility work",
        "operating_weight_lbs": (12000, 25000),
        "bucket_width_in": (24, 42),
        "bucket_capacity_cy": (0.2, 0.5),
        "max_dig_depth_ft": 15,
        "reach_at_ground_ft": 22,
        "typical_applications": [
            "Large utility installation", "Road construction", "Storm drainage",
            "Commercial site work",
        ],
    },
    ExcavatorClass.MEDIUM: {
        "name": "Medium Excavator",
        "description": "Standard excavator for heavy commercial and infrastructure",
        "operating_weight_lbs": (25000, 50000),
        "bucket_width_in": (36, 60),
        "bucket_capacity_cy": (0.5, 1.25),
        "max_dig_depth_ft": 22,
        "reach_at_ground_ft": 32,
        "typical_applications": [
            "Major pipeline work", "Highway construction", "Large-scale grading",
            "Deep excavation",
        ],
    },
    ExcavatorClass.LARGE: {
        "name": "Large Excavator",
        "description": "Heavy excavator for major infrastructure and mining",
        "operating_weight_lbs": (50000, 100000),
        "bucket_width_in": (48, 84),
        "bucket_capacity_cy": (1.0, 3.0),
        "max_dig_depth_ft": 30,
        "reach_at_ground_ft": 42,
        "typical_applications": [
            "Major infrastructure", "Mining operations", "Large pipeline", "Mass excavation",
        ],
    },
}

# Standard buckets: width (in), capacity (CY), classes that carry them
STANDARD_BUCKETS = [
    {"width": 12, "capacity": 0.03, "classes": [ExcavatorClass.MICRO]},
    {"width": 18, "capacity": 0.06, "classes": [ExcavatorClass.MICRO, ExcavatorClass.MINI]},
    {"width": 24, "capacity": 0.12, "classes": [ExcavatorClass.MINI, ExcavatorClass.SMALL]},
    {"width": 30, "capacity": 0.18, "classes": [ExcavatorClass.MINI, ExcavatorClass.SMALL]},
    {"width": 36, "capacity": 0.30, "classes": [ExcavatorClass.SMALL, ExcavatorClass.MEDIUM]},
    {"width": 42, "capacity": 0.40, "classes": [ExcavatorClass.SMALL, ExcavatorClass.MEDIUM]},
    {"width": 48, "capacity": 0.60, "classes": [ExcavatorClass.MEDIUM, ExcavatorClass.LARGE]},
    {"width": 60, "capacity": 0.90, "classes": [ExcavatorClass.MEDIUM, ExcavatorClass.LARGE]},
    {"width": 72, "capacity": 1.50, "classes": [ExcavatorClass.LARGE]},
    {"width": 84, "capacity": 2.00, "classes": [ExcavatorClass.LARGE]},
]

DEFAULT_BUCKET_CAPACITY_CY = 0.12

# Trench width (inches) upper bounds for the recommended excavator class
EXCAVATOR_WIDTH_THRESHOLDS = [
    (18.0, ExcavatorClass.MICRO),
    (30.0, ExcavatorClass.MINI),
    (42.0, ExcavatorClass.SMALL),
    (60.0, ExcavatorClass.MEDIUM),
]


def recommend_excavator_class(trench_width_ft: float) -> ExcavatorClass:
    """Recommend an excavator class for a trench width given in feet."""
    width_in = trench_width_ft * 12.0
    for max_width_in, excavator_class in EXCAVATOR_WIDTH_THRESHOLDS:
        if width_in <= max_width_in:
            return excavator_class
    return ExcavatorClass.LARGE


def workdays_to_calendar_days(workdays: float, working_days_per_week: int) -> float:
    """Convert workdays to calendar days: whole weeks count as 7 days."""
    if working_days_per_week >= 7:
        return workdays
    full_weeks = math.floor(workdays / working_days_per_week)
    remaining = workdays % working_days_per_week
    return full_weeks * 7 + remaining
