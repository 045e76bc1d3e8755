"""
Repetition tracking for RaiseCoach.

A hysteresis state machine over the angle stream: a rep starts when the arm
rises above rep_threshold and completes when it falls back below
rest_threshold. Each completed rep is scored against the target angle.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .config import GOOD_MARGIN, GREAT_MARGIN, RepThresholds
from .samples import ensure_finite_angle

logger = logging.getLogger(__name__)


class RepState(str, enum.Enum):
    REST = "rest"
    RAISING = "raising"
    LOWERING = "lowering"


class Quality(str, enum.Enum):
    GREAT = "great"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needsImprovement"


@dataclass(frozen=True)
class RepProgress:
    """Working data of the in-flight repetition."""

    max_angle_reached: float = 0.0
    in_progress: bool = False


@dataclass(frozen=True)
class RepResult:
    """One completed repetition."""

    max_angle_reached: float
    quality: Quality
    rep: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rep": self.rep,
            "max_angle_reached": self.max_angle_reached,
            "quality": self.quality.value,
        }


def classify_quality(max_angle: float, target_angle: float) -> Quality:
    """
    Score a rep by how close its peak came to the target.

    - peak >= target - 5              -> great
    - target - 15 <= peak < target - 5 -> good
    - otherwise                        -> needsImprovement
    """
    if max_angle >= target_angle - GREAT_MARGIN:
        return Quality.GREAT
    if max_angle >= target_angle - GOOD_MARGIN:
        return Quality.GOOD
    return Quality.NEEDS_IMPROVEMENT


def next_state(
    thresholds: RepThresholds,
    state: RepState,
    progress: RepProgress,
    angle: float,
) -> Tuple[RepState, RepProgress, Optional[float]]:
    """
    Pure transition function.

    Every decision is taken against the (state, progress) snapshot passed in,
    never against a partially updated value.

    Returns:
        (new_state, new_progress, completed_peak) where completed_peak is the
        peak angle of a rep that finished on this sample, else None
    """
    peak = progress.max_angle_reached

    if state is RepState.REST:
        if angle > thresholds.rep_threshold:
            return RepState.RAISING, RepProgress(max_angle_reached=angle, in_progress=True), None
        return state, progress, None

    if angle < thresholds.rest_threshold and progress.in_progress:
        return RepState.REST, RepProgress(), peak

    if state is RepState.RAISING:
        if angle > peak:
            return RepState.RAISING, RepProgress(max_angle_reached=angle, in_progress=True), None
        if angle < peak - thresholds.lowering_drop_delta:
            return RepState.LOWERING, progress, None

    return state, progress, None


class RepTracker:
    """
    Repetition state machine for one exercise session.

    Usage:
        tracker = RepTracker(RepThresholds())
        for angle in angles:
            result = tracker.update(angle)
            if result is not None:
                print(result.quality)
    """

    def __init__(self, thresholds: Optional[RepThresholds] = None):
        self.thresholds = thresholds or RepThresholds()
        self.state = RepState.REST
        self.progress = RepProgress()
        self.reps = 0

    @property
    def max_angle_reached(self) -> float:
        return self.progress.max_angle_reached

    @property
    def in_progress(self) -> bool:
        return self.progress.in_progress

    def update(self, angle: float) -> Optional[RepResult]:
        """
        Feed one angle sample.

        Args:
            angle: Current angle in degrees

        Returns:
            RepResult if this sample completed a repetition, else None

        Raises:
            InvalidSampleError: if the angle is NaN or infinite (state untouched)
        """
        ensure_finite_angle(angle)

        state, progress, completed_peak = next_state(self.thresholds, self.state, self.progress, angle)
        if state is not self.state:
            logger.debug("Rep state %s -> %s at %.1f deg", self.state.value, state.value, angle)
        self.state = state
        self.progress = progress

        if completed_peak is None:
            return None

        self.reps += 1
        result = RepResult(
            max_angle_reached=completed_peak,
            quality=classify_quality(completed_peak, self.thresholds.target_angle),
            rep=self.reps,
        )
        logger.info("Rep %d complete: peak %.1f deg (%s)", result.rep, completed_peak, result.quality.value)
        return result

    def feed(self, angles) -> List[RepResult]:
        """Feed a sequence of angles and collect the completed reps."""
        results = []
        for angle in angles:
            result = self.update(angle)
            if result is not None:
                results.append(result)
        return results

    def configure(self, thresholds: RepThresholds):
        """Replace thresholds and start over from REST."""
        self.thresholds = thresholds
        self.reset()

    def reset(self):
        """Abandon any in-flight rep without emitting a result."""
        if self.progress.in_progress:
            logger.debug("Abandoning in-flight rep (peak %.1f deg)", self.progress.max_angle_reached)
        self.state = RepState.REST
        self.progress = RepProgress()
        self.reps = 0


if __name__ == "__main__":
    print("Testing RepTracker:")

    tracker = RepTracker()

    print("\n1. Full raise to 100°:")
    for r in tracker.feed([10, 85, 95, 100, 90, 60, 25]):
        print(f"   Rep {r.rep}: peak {r.max_angle_reached:.0f}° -> {r.quality.value}")

    print("\n2. Partial raise to 90°:")
    for r in tracker.feed([10, 85, 90, 60, 20]):
        print(f"   Rep {r.rep}: peak {r.max_angle_reached:.0f}° -> {r.quality.value}")

    print("\n3. Never crosses the rep threshold:")
    print(f"   Results: {tracker.feed([10, 50, 20])}, state: {tracker.state.value}")
