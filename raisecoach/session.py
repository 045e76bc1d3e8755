"""
Exercise session: the per-user pipeline the transport feeds.

One session owns one OrientationEstimator and one RepTracker. Each decoded
packet runs exactly one synchronous update cycle and the resulting tick is
delivered to every subscriber. Sessions share no state, so concurrent users
need one session each.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .config import RepThresholds
from .errors import InvalidSampleError
from .orientation import AngleMode, OrientationEstimator
from .reps import RepResult, RepState, RepTracker
from .samples import Sample, SensorPacket
from .stats import SetSummary, summarize_reps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateTick:
    """What a subscriber receives for every processed packet."""

    angle: float
    momentum: float
    state: RepState
    reps: int
    rep_result: Optional[RepResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angle": self.angle,
            "momentum": self.momentum,
            "state": self.state.value,
            "reps": self.reps,
            "rep_result": self.rep_result.to_dict() if self.rep_result else None,
        }


Subscriber = Callable[[UpdateTick], None]


class ExerciseSession:
    """
    Orientation estimator + rep tracker + subscribers.

    Usage:
        session = ExerciseSession()
        unsubscribe = session.subscribe(on_tick)
        for packet in packets:
            session.process(packet)
        print(session.summary())
    """

    def __init__(
        self,
        thresholds: Optional[RepThresholds] = None,
        angle_mode: AngleMode = AngleMode.RAW,
        momentum_limit: Optional[float] = None,
    ):
        self.estimator = OrientationEstimator(mode=angle_mode, momentum_limit=momentum_limit)
        self.tracker = RepTracker(thresholds)
        self.results: List[RepResult] = []
        self.last_acc: Optional[Sample] = None
        self._subscribers: List[Subscriber] = []

    @property
    def thresholds(self) -> RepThresholds:
        return self.tracker.thresholds

    @property
    def state(self) -> RepState:
        return self.tracker.state

    @property
    def reps(self) -> int:
        return self.tracker.reps

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a tick callback.

        Returns:
            A function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def process(self, packet: Union[SensorPacket, Mapping[str, Any]]) -> Optional[UpdateTick]:
        """
        Run one update cycle.

        Packets without acceleration carry no angle and are ignored.

        Returns:
            The tick delivered to subscribers, or None if nothing was updated

        Raises:
            InvalidSampleError: on non-finite input; no state is modified
        """
        if not isinstance(packet, SensorPacket):
            packet = SensorPacket.from_dict(packet)
        if packet.acc is None:
            return None

        if packet.gyro is not None:
            angle, momentum = self.estimator.update_from_acceleration_and_gyro(packet.acc, packet.gyro)
        else:
            angle = self.estimator.update_from_acceleration(packet.acc)
            momentum = self.estimator.momentum

        self.last_acc = packet.acc
        result = self.tracker.update(angle)
        if result is not None:
            self.results.append(result)

        tick = UpdateTick(
            angle=angle,
            momentum=momentum,
            state=self.tracker.state,
            reps=self.tracker.reps,
            rep_result=result,
        )
        for callback in list(self._subscribers):
            callback(tick)
        return tick

    def process_acceleration(self, acc: Sample, gyro: Optional[Sample] = None) -> Optional[UpdateTick]:
        return self.process(SensorPacket(acc=acc, gyro=gyro))

    def configure(self, thresholds: Union[RepThresholds, Mapping[str, Any]]) -> RepThresholds:
        """
        Validate and apply new thresholds; the tracker restarts from REST.

        Raises:
            InvalidConfigurationError: if the thresholds are invalid
                                       (current configuration is kept)
        """
        if not isinstance(thresholds, RepThresholds):
            thresholds = RepThresholds.from_mapping(thresholds)
        self.tracker.configure(thresholds)
        self.results = []
        logger.info("Configured thresholds: %s", thresholds.to_dict())
        return thresholds

    def calibrate(self, resting: Optional[Sample] = None) -> float:
        """
        Capture the resting pose as zero angle and start over.

        Args:
            resting: Accelerometer sample of the resting arm; defaults to the
                     most recent sample processed

        Raises:
            InvalidSampleError: if no sample is given and none was processed yet
        """
        if resting is None:
            resting = self.last_acc
        if resting is None:
            raise InvalidSampleError("sensor data not available for calibration")
        offset = self.estimator.calibrate(resting)
        self.reset()
        return offset

    def reset(self):
        """Start a new session; an in-flight rep is dropped without a result."""
        self.estimator.reset()
        self.tracker.reset()
        self.results = []

    def summary(self) -> SetSummary:
        return summarize_reps(self.results)
