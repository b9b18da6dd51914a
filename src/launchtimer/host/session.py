"""
TimerSession: the host loop around one MotionTimer.

Flow for a single run:
  1. Start the sample source (SensorUnavailableError is logged and re-raised;
     the timer never leaves IDLE)
  2. Deliver samples one at a time to MotionTimer.feed()
  3. On RunFinished: stop the source, capture a RunResult, reset the timer
  4. If the stream ends first, return None and leave the timer as it is

The session owns its timer; callers that want events as they happen
subscribe to session.timer directly.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from launchtimer.host.sources import SampleSource, SensorUnavailableError
from launchtimer.motion.events import RunFinished, TimerEvent
from launchtimer.motion.timer import MotionTimer, TimerConfig

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Timestamps and duration of one finished run, read before reset."""
    start_timestamp: float
    finish_timestamp: float
    duration: float        # seconds
    peak_speed: float      # km/h, speed at the finishing sample
    samples_seen: int      # samples delivered in this session, idle ones included


class TimerSession:
    """Drives one MotionTimer from one SampleSource at a time."""

    def __init__(
        self,
        timer: Optional[MotionTimer] = None,
        config: Optional[TimerConfig] = None,
    ):
        """
        Args:
            timer: MotionTimer to drive (a new one is built if omitted).
            config: TimerConfig for the new timer; ignored when `timer` is given.
        """
        self.timer = timer or MotionTimer(config)
        self.events: List[TimerEvent] = []
        self.last_result: Optional[RunResult] = None

    async def run(self, source: SampleSource) -> Optional[RunResult]:
        """
        Feed `source` into the timer until a run finishes or the stream ends.

        Returns:
            RunResult for the finished run, or None if the stream ran out first.

        Raises:
            SensorUnavailableError: if the source cannot be started.
            InvariantViolation: propagated from the timer.
        """
        try:
            source.start()
        except SensorUnavailableError as exc:
            logger.error("Accelerometer unavailable: %s", exc)
            raise

        samples_seen = 0
        result: Optional[RunResult] = None
        try:
            async for sample in source:
                samples_seen += 1
                events = self.timer.feed(sample)
                self.events.extend(events)

                if any(isinstance(e, RunFinished) for e in events):
                    result = self._capture(samples_seen)
                    self.events.extend(self.timer.reset())
                    break
        finally:
            source.stop()

        if result is None:
            logger.info(
                "Sample stream ended after %d samples without finishing (state=%s)",
                samples_seen,
                self.timer.state.value,
            )
        self.last_result = result
        return result

    def _capture(self, samples_seen: int) -> RunResult:
        return RunResult(
            start_timestamp=self.timer.start_timestamp,
            finish_timestamp=self.timer.finish_timestamp,
            duration=self.timer.duration,
            peak_speed=self.timer.speed,
            samples_seen=samples_seen,
        )
