"""
Sensor sample types for RaiseCoach.

A Sample is one 3-axis reading from the wearable: acceleration in g or
angular rate in deg/s. A SensorPacket groups whatever the transport decoded
from a single notification (acceleration, angular rate, or both).
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from .errors import InvalidSampleError


@dataclass(frozen=True)
class Sample:
    """Immutable 3-axis vector."""

    x: float
    y: float
    z: float

    @classmethod
    def from_any(cls, value: Union["Sample", Mapping[str, Any], Sequence[float]]) -> "Sample":
        """
        Build a Sample from a Sample, an {x, y, z} mapping or an (x, y, z) sequence.

        Raises:
            InvalidSampleError: if the value has the wrong shape or a field
                is not a number.
        """
        if isinstance(value, Sample):
            return value
        try:
            if isinstance(value, Mapping):
                x, y, z = value["x"], value["y"], value["z"]
            else:
                x, y, z = value
            return cls(float(x), float(y), float(z))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidSampleError(f"cannot build sample from {value!r}: {e}") from e

    def magnitude(self) -> float:
        """Euclidean norm, computed without overflowing for large components."""
        return math.hypot(self.x, self.y, self.z)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


@dataclass(frozen=True)
class SensorPacket:
    """One decoded notification: optional acceleration and angular rate."""

    acc: Optional[Sample] = None
    gyro: Optional[Sample] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SensorPacket":
        acc = data.get("acc")
        gyro = data.get("gyro")
        return cls(
            acc=Sample.from_any(acc) if acc is not None else None,
            gyro=Sample.from_any(gyro) if gyro is not None else None,
        )

    def is_empty(self) -> bool:
        return self.acc is None and self.gyro is None


def ensure_finite(*samples: Sample) -> None:
    """Raise InvalidSampleError if any field of any sample is NaN or infinite."""
    for sample in samples:
        if not sample.is_finite():
            raise InvalidSampleError(f"non-finite sample: {sample}")


def ensure_finite_angle(angle: float) -> None:
    if not math.isfinite(angle):
        raise InvalidSampleError(f"non-finite angle: {angle}")
