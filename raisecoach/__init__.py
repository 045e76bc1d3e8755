"""
RaiseCoach Motion Pipeline

This package turns a wearable motion sensor stream into exercise coaching:
- OrientationEstimator: heuristic tilt angle and momentum from acc/gyro samples
- RepTracker: hysteresis state machine emitting scored repetitions
- ExerciseSession: one user's pipeline with tick subscribers
- parse_sensor_line: decoder for the wearable's text notifications
- summarize_reps / replay: set statistics and offline replay of recordings

Usage:
    from raisecoach import ExerciseSession, parse_sensor_line

    session = ExerciseSession()
    session.subscribe(lambda tick: print(tick.angle, tick.rep_result))

    # For every BLE notification:
    session.process(parse_sensor_line(line))
"""

from .errors import (
    RaiseCoachError,
    InvalidSampleError,
    InvalidConfigurationError,
    SensorParseError,
)
from .samples import Sample, SensorPacket
from .config import RepThresholds
from .orientation import AngleMode, OrientationEstimator, OrientationState
from .reps import Quality, RepProgress, RepResult, RepState, RepTracker, classify_quality
from .feedback import RepFeedback, feedback_for
from .parser import parse_sensor_line
from .session import ExerciseSession, UpdateTick
from .stats import SetSummary, compute_loss_pct, summarize_reps
from .analysis import angles_from_acceleration, momentum_from_samples, replay

__all__ = [
    # Errors
    'RaiseCoachError',
    'InvalidSampleError',
    'InvalidConfigurationError',
    'SensorParseError',

    # Samples and configuration
    'Sample',
    'SensorPacket',
    'RepThresholds',

    # Orientation
    'AngleMode',
    'OrientationEstimator',
    'OrientationState',

    # Reps
    'Quality',
    'RepProgress',
    'RepResult',
    'RepState',
    'RepTracker',
    'classify_quality',
    'RepFeedback',
    'feedback_for',

    # Session
    'parse_sensor_line',
    'ExerciseSession',
    'UpdateTick',

    # Analysis
    'SetSummary',
    'compute_loss_pct',
    'summarize_reps',
    'angles_from_acceleration',
    'momentum_from_samples',
    'replay',
]

__version__ = '1.0.0'
