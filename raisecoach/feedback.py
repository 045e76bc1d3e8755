"""Per-rep coaching cues: on-screen message and haptic pattern."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .reps import Quality, RepResult


@dataclass(frozen=True)
class RepFeedback:
    """
    Cue for the presentation layer.

    Attributes:
        message: Text shown to the user.
        haptic_pattern: Vibration durations in ms, alternating on/off,
                        starting with "on".
    """

    message: str
    haptic_pattern: Tuple[int, ...]

    @property
    def pulses(self) -> int:
        return (len(self.haptic_pattern) + 1) // 2

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "haptic_pattern": list(self.haptic_pattern)}


FEEDBACK = {
    Quality.GREAT: RepFeedback("Great rep!", (200,)),
    Quality.GOOD: RepFeedback("Good, but try to raise higher", (100, 50, 100)),
    Quality.NEEDS_IMPROVEMENT: RepFeedback("Raise your arm higher next time", (50, 30, 50, 30, 50)),
}

CALIBRATED_MESSAGE = "Calibrated! Start your exercise."


def feedback_for(result: RepResult) -> RepFeedback:
    return FEEDBACK[result.quality]
