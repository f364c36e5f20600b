"""
Clamps values into the magnitude range CloudWatch accepts.
"""

import logging
import math

from .once import OnceFlags

logger = logging.getLogger(__name__)

# CloudWatch documents 1e-130 as the smallest accepted magnitude, but
# experimentally 1e-108 is the smallest it takes. Re-derive for other backends.
SMALLEST_SENDABLE = 1e-108

# Documented as 1e116, experimentally 1e108.
LARGEST_SENDABLE = 1e108


class ValueSanitizer:
    """
    Clamps non-zero values whose magnitude falls outside [smallest, largest].

    Zero passes through untouched. The sign is always preserved. The first
    clamp in each direction is logged at debug level; later ones are silent.
    """

    def __init__(self, smallest: float = SMALLEST_SENDABLE, largest: float = LARGEST_SENDABLE):
        if not 0 < smallest < largest:
            raise ValueError(f"Need 0 < smallest < largest, got {smallest} and {largest}")
        self.smallest = smallest
        self.largest = largest
        self._once = OnceFlags()

    def sanitize(self, name: str, value: float) -> float:
        try:
            value = float(value)
        except OverflowError:
            # ints beyond the float range
            value = math.copysign(math.inf, value)
        magnitude = abs(value)

        # NaN is left for the caller to drop
        if math.isnan(value) or magnitude == 0 or self.smallest <= magnitude <= self.largest:
            return value

        if magnitude < self.smallest:
            value = -self.smallest if value < 0 else self.smallest
            if self._once.first("too_small"):
                logger.debug(
                    f"Value for {name} is smaller than what CloudWatch supports; trimming to {value}. "
                    f"Further small values won't be logged."
                )
        else:
            value = -self.largest if value < 0 else self.largest
            if self._once.first("too_large"):
                logger.debug(
                    f"Value for {name} is larger than what CloudWatch supports; trimming to {value}. "
                    f"Further large values won't be logged."
                )
        return value
