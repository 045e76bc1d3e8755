"""Tests for the wearable text line decoder."""

import pytest

from raisecoach import Sample, SensorParseError, parse_sensor_line


def test_full_line_decodes_both_samples():
    packet = parse_sensor_line("Acc[X,Y,Z]:0.01,-0.98,0.12 Gyro[X,Y,Z]:1.5,-0.3,12.0")

    assert packet.acc == Sample(0.01, -0.98, 0.12)
    assert packet.gyro == Sample(1.5, -0.3, 12.0)


def test_acc_only_line():
    packet = parse_sensor_line("Acc[X,Y,Z]:-1,0,0")
    assert packet.acc == Sample(-1.0, 0.0, 0.0)
    assert packet.gyro is None


def test_gyro_only_line():
    packet = parse_sensor_line("Gyro[X,Y,Z]:3,4,0\n")
    assert packet.acc is None
    assert packet.gyro == Sample(3.0, 4.0, 0.0)


def test_unrecognized_line_gives_empty_packet():
    assert parse_sensor_line("hello from ESP32").is_empty()


@pytest.mark.parametrize("line", [
    "Acc[X,Y,Z]:1.2.3,0,0",
    "Acc[X,Y,Z]:-,0,0",
    "Gyro[X,Y,Z]:0,0,..",
])
def test_malformed_numbers_raise(line):
    with pytest.raises(SensorParseError):
        parse_sensor_line(line)
