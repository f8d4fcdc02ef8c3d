"""
Abstract base class for the calculation stages.

Input: ExcavationInputs plus the previous stage's result
Output: an immutable stage result; audit entries go to the shared AuditSink
"""

import logging
from abc import ABC, abstractmethod

from ..reference_data import CUBIC_FEET_PER_CY
from .audit import AuditSink
from .reference_lookup import ReferenceLookup

logger = logging.getLogger(__name__)


class BaseStage(ABC):
    """All pipeline stages inherit from this."""

    def __init__(self, lookup: ReferenceLookup = None):
        self.lookup = lookup or ReferenceLookup()

    @abstractmethod
    def calculate(self, *args, sink: AuditSink):
        """
        Derive this stage's values from its inputs.
        Every derived value records one entry on the sink.
        """
        pass

    # --- Helper methods for all stages ---

    def inches_to_feet(self, inches: float) -> float:
        """Convert inches to feet."""
        return inches / 12.0

    def cubic_feet_to_cy(self, cubic_feet: float) -> float:
        """Convert cubic feet to cubic yards."""
        return cubic_feet / CUBIC_FEET_PER_CY

    def safe_divide(self, numerator: float, denominator: float) -> float:
        """Division that yields 0 instead of raising on a zero denominator."""
        if denominator <= 0:
            return 0.0
        return numerator / denominator
