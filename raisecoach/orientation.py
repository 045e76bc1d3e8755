"""
Orientation estimation for RaiseCoach.

Turns accelerometer (and optionally gyroscope) samples from the arm-mounted
sensor into a scalar tilt angle and a motion-intensity "momentum".

The angle is a heuristic: pitch and roll are both derived from the gravity
vector and whichever has the larger magnitude is reported. This only works
for the mounting orientation the exercise thresholds were tuned against; it
is not a general attitude estimate.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import InvalidSampleError
from .samples import Sample, ensure_finite

logger = logging.getLogger(__name__)

SMOOTHING_PREV = 0.7
SMOOTHING_NEW = 0.3

GYRO_WEIGHT = 0.7
ACC_WEIGHT = 0.3
MOMENTUM_SCALE = 10.0


class AngleMode(str, enum.Enum):
    """How the reported angle follows new samples."""

    RAW = "raw"            # exercise tracking: latest heuristic angle
    SMOOTHED = "smoothed"  # gauge view: angle = prev*0.7 + new*0.3


@dataclass
class OrientationState:
    """Most recent angle (degrees, signed) and momentum (>= 0)."""

    angle: float = 0.0
    momentum: float = 0.0


def tilt_angles(x: float, y: float, z: float) -> Tuple[float, float]:
    """
    Pitch and roll of the gravity vector.

    Returns:
        (pitch, roll) in degrees, where
        pitch = atan2(y, sqrt(x² + z²)) and roll = atan2(-x, z)
    """
    pitch = math.atan2(y, math.hypot(x, z)) * 180.0 / math.pi
    roll = math.atan2(-x, z) * 180.0 / math.pi
    return pitch, roll


def heuristic_angle(sample: Sample) -> float:
    """Whichever of pitch/roll has the larger absolute value (roll on ties)."""
    pitch, roll = tilt_angles(sample.x, sample.y, sample.z)
    return pitch if abs(pitch) > abs(roll) else roll


def momentum_from(acc: Sample, gyro: Sample) -> float:
    """Unsmoothed momentum: (|gyro| * 0.7 + |acc| * 0.3) * 10."""
    return (gyro.magnitude() * GYRO_WEIGHT + acc.magnitude() * ACC_WEIGHT) * MOMENTUM_SCALE


class OrientationEstimator:
    """
    Angle and momentum estimator for one exercise session.

    Holds nothing but the previous smoothed values (plus an optional
    calibration offset), so independent sessions need independent instances.

    Usage:
        estimator = OrientationEstimator(mode=AngleMode.RAW)
        angle = estimator.update_from_acceleration(acc)
        angle, momentum = estimator.update_from_acceleration_and_gyro(acc, gyro)
    """

    def __init__(
        self,
        mode: AngleMode = AngleMode.RAW,
        momentum_limit: Optional[float] = None,
    ):
        """
        Args:
            mode: RAW for exercise tracking, SMOOTHED for the gauge view
            momentum_limit: Optional cap applied to the raw momentum before
                            smoothing (the exercise gauge uses 100)
        """
        self.mode = AngleMode(mode)
        self.momentum_limit = momentum_limit
        self.state = OrientationState()
        self.calibration_offset: Optional[float] = None

    @property
    def angle(self) -> float:
        return self.state.angle

    @property
    def momentum(self) -> float:
        return self.state.momentum

    def set_mode(self, mode: AngleMode):
        """Switch between raw and smoothed angle reporting."""
        self.mode = AngleMode(mode)

    def _measure_angle(self, sample: Sample) -> float:
        angle = heuristic_angle(sample)
        if self.calibration_offset is not None:
            angle = max(0.0, angle - self.calibration_offset)
        return angle

    def _next_angle(self, sample: Sample) -> float:
        measured = self._measure_angle(sample)
        if self.mode is AngleMode.SMOOTHED:
            return self.state.angle * SMOOTHING_PREV + measured * SMOOTHING_NEW
        return measured

    def update_from_acceleration(self, sample: Sample) -> float:
        """
        Update the angle from one accelerometer sample.

        Args:
            sample: Acceleration in g

        Returns:
            The new angle in degrees

        Raises:
            InvalidSampleError: if any field is non-finite (state untouched)
        """
        ensure_finite(sample)
        self.state.angle = self._next_angle(sample)
        return self.state.angle

    def update_from_acceleration_and_gyro(self, acc: Sample, gyro: Sample) -> Tuple[float, float]:
        """
        Update angle and momentum from one paired acc/gyro reading.

        Momentum is smoothed as prev*0.7 + raw*0.3 and is never negative.

        Returns:
            (angle, momentum)

        Raises:
            InvalidSampleError: if any field of either sample is non-finite,
                                or the momentum would overflow (neither
                                angle nor momentum is modified)
        """
        ensure_finite(acc, gyro)

        raw = momentum_from(acc, gyro)
        if self.momentum_limit is not None:
            raw = min(self.momentum_limit, raw)

        angle = self._next_angle(acc)
        momentum = self.state.momentum * SMOOTHING_PREV + raw * SMOOTHING_NEW
        if not math.isfinite(momentum):
            raise InvalidSampleError(f"momentum overflow for acc={acc}, gyro={gyro}")

        self.state.angle = angle
        self.state.momentum = momentum
        return angle, momentum

    def calibrate(self, resting: Sample) -> float:
        """
        Use the current resting pose as the zero angle.

        Subsequent angles are reported relative to this pose and clamped at 0.

        Returns:
            The captured offset in degrees
        """
        ensure_finite(resting)
        self.calibration_offset = heuristic_angle(resting)
        logger.info("Calibrated angle offset to %.2f deg", self.calibration_offset)
        return self.calibration_offset

    def clear_calibration(self):
        self.calibration_offset = None

    def reset(self):
        """Reset angle and momentum to zero (calibration is kept)."""
        self.state = OrientationState()


if __name__ == "__main__":
    print("Testing OrientationEstimator:")

    estimator = OrientationEstimator()

    print("\n1. Sensor flat (gravity along Z):")
    print(f"   Angle: {estimator.update_from_acceleration(Sample(0.0, 0.0, 1.0)):.2f}°")
    print("   Expected: 0°")

    print("\n2. Arm raised sideways (gravity along -X):")
    print(f"   Angle: {estimator.update_from_acceleration(Sample(-1.0, 0.0, 0.0)):.2f}°")
    print("   Expected: 90°")

    print("\n3. Smoothed mode converging on 45°:")
    smoothed = OrientationEstimator(mode=AngleMode.SMOOTHED)
    for _ in range(20):
        angle = smoothed.update_from_acceleration(Sample(-0.707, 0.0, 0.707))
    print(f"   Angle: {angle:.2f}°")
