"""
Exercise configuration for RaiseCoach.

Thresholds are fixed per exercise and supplied by the caller. Server
settings follow the environment-variable convention of the bridge server
(RAISECOACH_*).
"""

import math
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from .errors import InvalidConfigurationError

# =============================================================================
# Defaults (lateral arm raise)
# =============================================================================

REP_THRESHOLD = 80.0        # Angle needed to count as a rep (degrees)
REST_THRESHOLD = 30.0       # Angle below which the arm is considered at rest
TARGET_ANGLE = 100.0        # Goal angle for quality scoring
LOWERING_DROP_DELTA = 15.0  # Drop from peak that signals the lowering phase

GREAT_MARGIN = 5.0          # Peak within this of target -> "great"
GOOD_MARGIN = 15.0          # Peak within this of target -> "good"

MOMENTUM_THRESHOLD = 70.0   # Momentum above which the gauge warns

# Server
HOST = os.getenv("RAISECOACH_HOST", "0.0.0.0")
PORT = int(os.getenv("RAISECOACH_PORT", "8765"))
ANGLE_MODE = os.getenv("RAISECOACH_ANGLE_MODE", "raw").strip().lower()

_CAMEL_ALIASES = {
    "repThreshold": "rep_threshold",
    "restThreshold": "rest_threshold",
    "targetAngle": "target_angle",
    "loweringDropDelta": "lowering_drop_delta",
}


@dataclass(frozen=True)
class RepThresholds:
    """
    Angle thresholds driving the repetition state machine.

    Attributes:
        rep_threshold: Angle above which a raise counts as started.
        rest_threshold: Angle below which the arm is at rest (rep completes).
        target_angle: Goal angle used for quality scoring.
        lowering_drop_delta: Drop from the peak that marks the lowering phase.

    All values are degrees and must satisfy
    0 < rest_threshold < rep_threshold < target_angle.
    """

    rep_threshold: float = REP_THRESHOLD
    rest_threshold: float = REST_THRESHOLD
    target_angle: float = TARGET_ANGLE
    lowering_drop_delta: float = LOWERING_DROP_DELTA

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigurationError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise InvalidConfigurationError(f"{f.name} must be a positive degree value, got {value}")
        if not (self.rest_threshold < self.rep_threshold < self.target_angle):
            raise InvalidConfigurationError(
                "thresholds must satisfy rest_threshold < rep_threshold < target_angle "
                f"(got rest={self.rest_threshold}, rep={self.rep_threshold}, "
                f"target={self.target_angle})"
            )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "RepThresholds":
        """
        Build thresholds from named options, filling gaps with defaults.

        Accepts snake_case names and the camelCase names used by the mobile
        client (repThreshold, restThreshold, targetAngle, loweringDropDelta).

        Raises:
            InvalidConfigurationError: on unknown option names or invalid values.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name not in known:
                raise InvalidConfigurationError(f"unknown threshold option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "RepThresholds":
        merged = self.to_dict()
        merged.update(changes)
        return RepThresholds.from_mapping(merged)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)
