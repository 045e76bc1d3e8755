"""
Set-level statistics over completed reps.

Mirrors the completion screen of the mobile app: rep counts per quality,
an accuracy percentage, a rating label and a fatigue proxy (peak angle
loss from the first to the last rep).
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from .reps import Quality, RepResult

QUALITY_WEIGHTS = {
    Quality.GREAT: 1.0,
    Quality.GOOD: 0.5,
    Quality.NEEDS_IMPROVEMENT: 0.0,
}

RATING_BANDS = (
    (95.0, "Perfect!"),
    (85.0, "Excellent"),
    (75.0, "Great"),
    (65.0, "Good"),
    (50.0, "Fair"),
)


def clamp(v, lo, hi):
    return lo if v < lo else hi if v > hi else v


def compute_loss_pct(values) -> Optional[float]:
    """Loss % from first to last (fatigue proxy)."""
    if values is None or len(values) < 2:
        return None
    first = float(values[0])
    last = float(values[-1])
    if first <= 0:
        return None
    loss = (1.0 - (last / first)) * 100.0
    return round(clamp(loss, 0.0, 100.0), 2)


def rating_for(accuracy: float) -> str:
    for floor, label in RATING_BANDS:
        if accuracy >= floor:
            return label
    return "Needs Improvement"


@dataclass(frozen=True)
class SetSummary:
    total_reps: int
    great_reps: int
    good_reps: int
    bad_reps: int
    accuracy: float
    rating: str
    avg_peak_angle: Optional[float]
    peak_angle_loss_pct: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize_reps(results: Sequence[RepResult]) -> SetSummary:
    """
    Summarize a set of completed reps.

    Accuracy is the quality-weighted share of reps in percent
    (great = 1, good = 0.5, needsImprovement = 0); an empty set scores 0.
    """
    qualities = [r.quality for r in results]
    peaks = np.asarray([r.max_angle_reached for r in results], dtype=np.float64)

    if qualities:
        weights = np.asarray([QUALITY_WEIGHTS[q] for q in qualities], dtype=np.float64)
        accuracy = round(float(weights.mean() * 100.0), 2)
        avg_peak = round(float(peaks.mean()), 2)
    else:
        accuracy = 0.0
        avg_peak = None

    return SetSummary(
        total_reps=len(qualities),
        great_reps=qualities.count(Quality.GREAT),
        good_reps=qualities.count(Quality.GOOD),
        bad_reps=qualities.count(Quality.NEEDS_IMPROVEMENT),
        accuracy=accuracy,
        rating=rating_for(accuracy),
        avg_peak_angle=avg_peak,
        peak_angle_loss_pct=compute_loss_pct(peaks),
    )
