"""
Time units and exact conversion between them.

Timer snapshots are recorded in nanoseconds and CloudWatch only understands a
few duration units, so values are converted with integer arithmetic that
truncates toward zero, the same way the recording clock loses precision.
"""

from enum import Enum
from typing import Optional

from .datapoint import StandardUnit


class TimeUnit(Enum):
    """A duration unit, valued by how many nanoseconds it spans."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60 * 1_000_000_000
    HOURS = 60 * 60 * 1_000_000_000
    DAYS = 24 * 60 * 60 * 1_000_000_000

    @property
    def nanos(self) -> int:
        return self.value

    @property
    def singular(self) -> str:
        """Lower-case singular name, e.g. ``second`` for SECONDS."""
        return self.name.lower()[:-1]

    def convert(self, duration: int, source: "TimeUnit") -> int:
        """
        Convert an integer duration expressed in `source` into this unit.

        Coarser targets truncate toward zero; finer targets multiply exactly.

        Args:
            duration: Duration in `source` units.
            source: The unit `duration` is expressed in.

        Returns:
            The duration expressed in this unit.
        """
        duration = int(duration)
        if source is self:
            return duration
        if source.nanos > self.nanos:
            return duration * (source.nanos // self.nanos)
        ratio = self.nanos // source.nanos
        magnitude = abs(duration) // ratio
        return magnitude if duration >= 0 else -magnitude

    def to_standard_unit(self) -> Optional[StandardUnit]:
        """Return the CloudWatch unit for this duration, or None if it has none."""
        return _STANDARD_UNITS.get(self)

    @classmethod
    def from_name(cls, name: str) -> "TimeUnit":
        """
        Look up a unit by name, accepting CloudWatch spellings like ``Seconds``.

        Raises:
            ValueError: If the name is not a known time unit.
        """
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown time unit: {name}") from None


_STANDARD_UNITS = {
    TimeUnit.MICROSECONDS: StandardUnit.MICROSECONDS,
    TimeUnit.MILLISECONDS: StandardUnit.MILLISECONDS,
    TimeUnit.SECONDS: StandardUnit.SECONDS,
}
