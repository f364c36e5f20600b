"""
Wire-level data structures sent to CloudWatch.

This module contains the CloudWatch unit enumeration, the Dimension tag and
the DataPoint record the translator produces and the batch consumes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple

# CloudWatch rejects datums carrying more dimensions than this.
MAX_DIMENSIONS = 10


class StandardUnit(Enum):
    """Units accepted by the CloudWatch PutMetricData API."""

    SECONDS = "Seconds"
    MICROSECONDS = "Microseconds"
    MILLISECONDS = "Milliseconds"
    BYTES = "Bytes"
    KILOBYTES = "Kilobytes"
    MEGABYTES = "Megabytes"
    GIGABYTES = "Gigabytes"
    TERABYTES = "Terabytes"
    BITS = "Bits"
    KILOBITS = "Kilobits"
    MEGABITS = "Megabits"
    GIGABITS = "Gigabits"
    TERABITS = "Terabits"
    PERCENT = "Percent"
    COUNT = "Count"
    BYTES_PER_SECOND = "Bytes/Second"
    KILOBYTES_PER_SECOND = "Kilobytes/Second"
    MEGABYTES_PER_SECOND = "Megabytes/Second"
    GIGABYTES_PER_SECOND = "Gigabytes/Second"
    TERABYTES_PER_SECOND = "Terabytes/Second"
    BITS_PER_SECOND = "Bits/Second"
    KILOBITS_PER_SECOND = "Kilobits/Second"
    MEGABITS_PER_SECOND = "Megabits/Second"
    GIGABITS_PER_SECOND = "Gigabits/Second"
    TERABITS_PER_SECOND = "Terabits/Second"
    COUNT_PER_SECOND = "Count/Second"
    NONE = "None"


@dataclass(frozen=True)
class Dimension:
    """A name/value tag narrowing what a data point represents."""

    name: str
    value: str

    def to_cloudwatch(self) -> Dict[str, str]:
        return {"Name": self.name, "Value": self.value}


@dataclass(frozen=True)
class DataPoint:
    """
    One named, timestamped, unit-tagged measurement ready for export.

    Attributes:
        name: CloudWatch metric name.
        timestamp: Time of the report cycle that produced the point.
        value: Already-sanitized value.
        unit: CloudWatch unit.
        dimensions: Ordered dimensions, at most MAX_DIMENSIONS of them.
    """

    name: str
    timestamp: datetime
    value: float
    unit: StandardUnit
    dimensions: Tuple[Dimension, ...] = field(default_factory=tuple)

    def to_cloudwatch(self) -> Dict[str, Any]:
        """Render the point as a boto3 ``MetricData`` entry."""
        return {
            "MetricName": self.name,
            "Timestamp": self.timestamp,
            "Value": self.value,
            "Unit": self.unit.value,
            "Dimensions": [d.to_cloudwatch() for d in self.dimensions],
        }

    def __str__(self) -> str:
        dims = ", ".join(f"{d.name}={d.value}" for d in self.dimensions)
        return f"{self.name}={self.value} {self.unit.value} [{dims}]"
