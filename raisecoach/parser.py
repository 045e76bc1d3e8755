"""
Decoder for the wearable's text notification format.

Each notification is one line such as:

    Acc[X,Y,Z]:0.01,-0.98,0.12 Gyro[X,Y,Z]:1.5,-0.3,12.0

Either part may be missing; the packet then carries only what matched.
"""

import logging
import re

from .errors import SensorParseError
from .samples import Sample, SensorPacket

logger = logging.getLogger(__name__)

ACC_PATTERN = re.compile(r"Acc\[X,Y,Z\]:([-.\d]+),([-.\d]+),([-.\d]+)")
GYRO_PATTERN = re.compile(r"Gyro\[X,Y,Z\]:([-.\d]+),([-.\d]+),([-.\d]+)")


def _match_sample(pattern, raw: str, label: str):
    match = pattern.search(raw)
    if match is None:
        logger.debug("No %s data in line: %r", label, raw)
        return None
    try:
        return Sample(*(float(g) for g in match.groups()))
    except ValueError as e:
        raise SensorParseError(f"bad {label} value in {raw!r}: {e}") from e


def parse_sensor_line(raw: str) -> SensorPacket:
    """
    Parse one sensor line into a SensorPacket.

    Raises:
        SensorParseError: if a part matches but a number is malformed
                          (e.g. "1.2.3" or "-")
    """
    return SensorPacket(
        acc=_match_sample(ACC_PATTERN, raw, "accelerometer"),
        gyro=_match_sample(GYRO_PATTERN, raw, "gyroscope"),
    )
