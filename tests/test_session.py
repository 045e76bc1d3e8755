"""Tests for the per-user exercise session pipeline."""

import math

import pytest

from raisecoach import (
    AngleMode,
    ExerciseSession,
    InvalidConfigurationError,
    InvalidSampleError,
    Quality,
    RepState,
    Sample,
    SensorPacket,
)


# ============================================================================
# Fixtures
# ============================================================================

def acc_at(angle_deg: float) -> Sample:
    """1 g accelerometer reading whose heuristic angle is angle_deg."""
    theta = math.radians(angle_deg)
    return Sample(-math.sin(theta), 0.0, math.cos(theta))


def run(session, angles, gyro=None):
    return [session.process(SensorPacket(acc=acc_at(a), gyro=gyro)) for a in angles]


SCENARIO_A = [10, 85, 95, 100, 90, 60, 25]


@pytest.fixture
def session():
    return ExerciseSession()


# ============================================================================
# Tests
# ============================================================================

def test_subscribers_receive_one_tick_per_packet(session):
    ticks = []
    session.subscribe(ticks.append)

    run(session, SCENARIO_A)

    assert len(ticks) == len(SCENARIO_A)
    assert [t.angle for t in ticks] == pytest.approx(SCENARIO_A)
    completed = [t.rep_result for t in ticks if t.rep_result is not None]
    assert len(completed) == 1
    assert completed[0].quality is Quality.GREAT
    assert completed[0].max_angle_reached == pytest.approx(100.0)
    assert ticks[-1].state is RepState.REST
    assert ticks[-1].reps == 1


def test_unsubscribe_stops_delivery(session):
    ticks = []
    unsubscribe = session.subscribe(ticks.append)
    run(session, [10])
    unsubscribe()
    run(session, [20])
    unsubscribe()

    assert len(ticks) == 1


def test_dict_packets_are_accepted(session):
    tick = session.process({"acc": {"x": -1.0, "y": 0.0, "z": 0.0}, "gyro": {"x": 0.0, "y": 0.0, "z": 10.0}})
    assert tick.angle == pytest.approx(90.0)
    assert tick.momentum > 0.0
    assert tick.state is RepState.RAISING


def test_acceleration_only_keeps_previous_momentum(session):
    session.process(SensorPacket(acc=acc_at(10), gyro=Sample(0.0, 0.0, 10.0)))
    momentum = session.estimator.momentum

    tick = session.process(SensorPacket(acc=acc_at(20)))

    assert tick.momentum == momentum


def test_gyro_only_packet_updates_nothing(session):
    ticks = []
    session.subscribe(ticks.append)

    assert session.process(SensorPacket(gyro=Sample(1.0, 2.0, 3.0))) is None
    assert ticks == []
    assert session.estimator.momentum == 0.0


def test_invalid_sample_is_all_or_nothing(session):
    ticks = []
    session.subscribe(ticks.append)
    run(session, [10, 85, 95])

    with pytest.raises(InvalidSampleError):
        session.process(SensorPacket(acc=Sample(float("nan"), 0.0, 1.0), gyro=Sample(0.0, 0.0, 0.0)))

    assert len(ticks) == 3
    assert session.state is RepState.RAISING
    assert session.tracker.max_angle_reached == pytest.approx(95.0)
    assert session.estimator.angle == pytest.approx(95.0)


def test_subscriber_errors_propagate(session):
    def boom(tick):
        raise RuntimeError("ui failed")

    session.subscribe(boom)
    with pytest.raises(RuntimeError):
        run(session, [10])


def test_configure_accepts_named_options(session):
    session.configure({"repThreshold": 50, "restThreshold": 20, "targetAngle": 70, "loweringDropDelta": 10})

    run(session, [10, 55, 68, 40, 15])

    assert len(session.results) == 1
    assert session.results[0].quality is Quality.GREAT


def test_invalid_configuration_keeps_previous_thresholds(session):
    before = session.thresholds

    with pytest.raises(InvalidConfigurationError):
        session.configure({"rest_threshold": 90})

    assert session.thresholds == before


def test_reset_drops_in_flight_rep_and_results(session):
    run(session, SCENARIO_A + [85, 100])
    assert len(session.results) == 1

    session.reset()
    run(session, [20])

    assert session.results == []
    assert session.state is RepState.REST
    assert session.reps == 0
    assert session.estimator.angle == pytest.approx(20.0)


def test_reset_then_replay_gives_identical_results(session):
    angles = SCENARIO_A + [40, 83, 88, 70, 22]
    run(session, angles)
    first = list(session.results)

    session.reset()
    run(session, angles)

    assert session.results == first


def test_calibrate_uses_latest_sample_by_default(session):
    run(session, [20])
    offset = session.calibrate()

    assert offset == pytest.approx(20.0)
    tick = run(session, [110])[0]
    assert tick.angle == pytest.approx(90.0)


def test_calibrate_without_any_sample_fails(session):
    with pytest.raises(InvalidSampleError):
        session.calibrate()


def test_sessions_are_independent():
    first = ExerciseSession()
    second = ExerciseSession(angle_mode=AngleMode.SMOOTHED)

    run(first, SCENARIO_A)
    run(second, [10, 85])

    assert len(first.results) == 1
    assert second.results == []
    assert second.estimator.mode is AngleMode.SMOOTHED
    assert first.estimator.mode is AngleMode.RAW


def test_summary_counts_reps_by_quality(session):
    run(session, SCENARIO_A)
    run(session, [10, 85, 90, 60, 20])
    run(session, [84, 20])

    summary = session.summary()

    assert summary.total_reps == 3
    assert (summary.great_reps, summary.good_reps, summary.bad_reps) == (1, 1, 1)
    assert summary.accuracy == pytest.approx(50.0)
    assert summary.rating == "Fair"


def test_tick_serializes_to_plain_types(session):
    tick = run(session, SCENARIO_A)[-1]
    data = tick.to_dict()

    assert data["state"] == "rest"
    assert data["rep_result"]["quality"] == "great"
    assert data["reps"] == 1
