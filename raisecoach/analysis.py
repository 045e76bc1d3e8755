"""
Batch helpers for recorded sensor data.

Recordings are numpy arrays of shape (N, 3), one row per notification.
These helpers reproduce the streaming pipeline sample for sample so that a
recording can be replayed offline with exactly the live behavior.
"""

import logging
from typing import List, Optional

import numpy as np

from .config import RepThresholds
from .errors import InvalidSampleError
from .orientation import (
    ACC_WEIGHT,
    GYRO_WEIGHT,
    MOMENTUM_SCALE,
    SMOOTHING_NEW,
    SMOOTHING_PREV,
    AngleMode,
)
from .reps import RepResult
from .samples import Sample
from .session import ExerciseSession

logger = logging.getLogger(__name__)


def _as_vectors(data, name: str) -> np.ndarray:
    arr = np.asarray(data, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidSampleError(f"{name} must have shape (N, 3), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        bad = int(np.argmax(~np.isfinite(arr).all(axis=1)))
        raise InvalidSampleError(f"{name} contains non-finite values (first at row {bad})")
    return arr


def _norms(arr: np.ndarray) -> np.ndarray:
    return np.hypot(np.hypot(arr[:, 0], arr[:, 1]), arr[:, 2])


def _smooth(values: np.ndarray) -> np.ndarray:
    out = np.empty_like(values)
    prev = 0.0
    for i, v in enumerate(values):
        prev = prev * SMOOTHING_PREV + v * SMOOTHING_NEW
        out[i] = prev
    return out


def angles_from_acceleration(
    acc,
    mode: AngleMode = AngleMode.RAW,
    calibration_offset: Optional[float] = None,
) -> np.ndarray:
    """
    Vectorized heuristic angle for every accelerometer row.

    Args:
        acc: (N, 3) accelerometer samples in g
        mode: RAW or SMOOTHED (smoothing starts from 0 like a fresh estimator)
        calibration_offset: Optional resting offset (angles clamped at 0)

    Returns:
        (N,) angles in degrees
    """
    arr = _as_vectors(acc, "acc")
    x, y, z = arr[:, 0], arr[:, 1], arr[:, 2]

    pitch = np.arctan2(y, np.hypot(x, z)) * 180.0 / np.pi
    roll = np.arctan2(-x, z) * 180.0 / np.pi
    angles = np.where(np.abs(pitch) > np.abs(roll), pitch, roll)

    if calibration_offset is not None:
        angles = np.maximum(0.0, angles - calibration_offset)
    if AngleMode(mode) is AngleMode.SMOOTHED:
        angles = _smooth(angles)
    return angles


def momentum_from_samples(acc, gyro) -> np.ndarray:
    """Smoothed momentum series for paired (N, 3) acc/gyro arrays."""
    a = _as_vectors(acc, "acc")
    g = _as_vectors(gyro, "gyro")
    if a.shape != g.shape:
        raise InvalidSampleError(f"acc and gyro lengths differ: {a.shape} vs {g.shape}")

    raw = (_norms(g) * GYRO_WEIGHT + _norms(a) * ACC_WEIGHT) * MOMENTUM_SCALE
    momentum = _smooth(raw)
    if not np.all(np.isfinite(momentum)):
        bad = int(np.argmax(~np.isfinite(momentum)))
        raise InvalidSampleError(f"momentum overflow (first at row {bad})")
    return momentum


def replay(
    acc,
    gyro=None,
    thresholds: Optional[RepThresholds] = None,
    mode: AngleMode = AngleMode.RAW,
) -> List[RepResult]:
    """
    Run a fresh session over a recording and collect the completed reps.

    Returns:
        RepResults in completion order
    """
    a = _as_vectors(acc, "acc")
    g = None
    if gyro is not None:
        g = _as_vectors(gyro, "gyro")
        if a.shape != g.shape:
            raise InvalidSampleError(f"acc and gyro lengths differ: {a.shape} vs {g.shape}")

    session = ExerciseSession(thresholds=thresholds, angle_mode=mode)
    for i in range(a.shape[0]):
        acc_sample = Sample(*a[i].tolist())
        gyro_sample = Sample(*g[i].tolist()) if g is not None else None
        session.process_acceleration(acc_sample, gyro_sample)

    logger.info("Replayed %d samples: %d reps", a.shape[0], len(session.results))
    return list(session.results)


def acceleration_for_angle(angles) -> np.ndarray:
    """
    Synthetic 1 g accelerometer rows whose heuristic angle equals each input.

    Gravity is rotated in the x/z plane so roll carries the angle and pitch
    stays 0. Used to build recordings for replay tests and demos.
    """
    theta = np.radians(np.asarray(angles, dtype=np.float64))
    return np.stack([-np.sin(theta), np.zeros_like(theta), np.cos(theta)], axis=1)
