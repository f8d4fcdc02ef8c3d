"""
Pre-flight input checks.

Returns a map of snake_case field path → message. An empty map means the
inputs can be calculated.
"""

import math
from typing import Dict

from ..schemas import ExcavationInputs


def _float_fields(inputs: ExcavationInputs):
    """(path, value) for every float input. Integer fields can't be non-finite."""
    yield "pipe.nps", inputs.pipe.nps
    yield "pipe.od", inputs.pipe.od.value
    yield "geometry.length", inputs.geometry.length
    yield "geometry.depth", inputs.geometry.depth.value
    yield "geometry.bottom_width", inputs.geometry.bottom_width.value
    yield "geometry.cover_to_top", inputs.geometry.cover_to_top
    yield "soil.slope_ratio", inputs.soil.slope_ratio.value
    yield "hand_dig.tolerance_zone_width", inputs.hand_dig.tolerance_zone_width
    yield "hand_dig.buffer_length_each_side", inputs.hand_dig.buffer_length_each_side
    if inputs.hand_dig.override is not None:
        yield "hand_dig.override.value", inputs.hand_dig.override.value
    yield "schedule.hours_per_day", inputs.schedule.hours_per_day
    yield "equipment.bucket_width", inputs.equipment.bucket_width
    yield "equipment.sawcut_length", inputs.equipment.sawcut_length


def validate_inputs(inputs: ExcavationInputs) -> Dict[str, str]:
    errors = {}

    if not inputs.project_name.strip():
        errors["project_name"] = "Project name is required"

    # Pipe
    if inputs.pipe.nps <= 0:
        errors["pipe.nps"] = "NPS must be positive"
    if inputs.pipe.od.value <= 0:
        errors["pipe.od"] = "OD must be positive"

    # Geometry
    geometry = inputs.geometry
    if geometry.length <= 0:
        errors["geometry.length"] = "Length must be positive"
    if geometry.depth.value <= 0:
        errors["geometry.depth"] = "Depth must be positive"
    if geometry.bottom_width.value <= 0:
        errors["geometry.bottom_width"] = "Bottom width must be positive"
    if geometry.cover_to_top < 0:
        errors["geometry.cover_to_top"] = "Cover to top cannot be negative"

    if inputs.soil.slope_ratio.value < 0:
        errors["soil.slope_ratio"] = "Slope ratio cannot be negative"

    # Crew
    if inputs.crew.operators < 1:
        errors["crew.operators"] = "At least one operator is required"
    if inputs.crew.laborers < 1:
        errors["crew.laborers"] = "At least one laborer is required"

    # Schedule
    schedule = inputs.schedule
    if schedule.hours_per_day < 1 or schedule.hours_per_day > 24:
        errors["schedule.hours_per_day"] = "Hours per day must be between 1 and 24"
    if schedule.shifts_per_day < 1 or schedule.shifts_per_day > 3:
        errors["schedule.shifts_per_day"] = "Shifts per day must be between 1 and 3"
    if schedule.working_days_per_week < 1 or schedule.working_days_per_week > 7:
        errors["schedule.working_days_per_week"] = "Working days per week must be between 1 and 7"

    # Hand dig
    if inputs.hand_dig.tolerance_zone_width < 0:
        errors["hand_dig.tolerance_zone_width"] = "Tolerance zone width cannot be negative"
    if inputs.hand_dig.buffer_length_each_side < 0:
        errors["hand_dig.buffer_length_each_side"] = "Buffer length cannot be negative"

    # Equipment
    if inputs.equipment.bucket_width <= 0:
        errors["equipment.bucket_width"] = "Bucket width must be positive"
    if inputs.equipment.sawcut_length < 0:
        errors["equipment.sawcut_length"] = "Sawcut length cannot be negative"

    # NaN slips through every comparison above, inf through the lower bounds
    for path, value in _float_fields(inputs):
        if not math.isfinite(value):
            errors[path] = "Must be a finite number"

    return errors
