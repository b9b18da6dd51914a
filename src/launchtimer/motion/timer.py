"""
MotionTimer: accelerometer samples in, launch time out.

A three-state machine driven one sample at a time:

    IDLE ──(|a| > motion_threshold)──▶ ACTIVE ──(speed > finish_threshold)──▶ FINISHED
      ▲                                                                          │
      └──────────────────────────────── reset() ◀────────────────────────────────┘

While ACTIVE, each sample adds |a| * step * unit_conversion to the speed
estimate. The sample that ends IDLE is integrated too. Once FINISHED the timer
ignores samples until the host calls reset(); it never resets itself.

The step is the nominal sample interval by default. With integration="timestamp"
it is the gap between consecutive sample timestamps instead, which keeps the
estimate honest when the sensor cadence drifts from 100 Hz.

Every observable change is returned from on_sample()/reset() as a list of
event values and dispatched synchronously to subscribed listeners, in order.
Calls must be serialised by the host: nothing here is safe to interleave.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from launchtimer.motion.events import (
    AccelSample,
    RunFinished,
    RunState,
    SpeedUpdated,
    StateChanged,
    TimerEvent,
)

logger = logging.getLogger(__name__)

# ── Constants ─────────────────────────────────────────────────────────────────

FIXED_STEP = "fixed"
TIMESTAMP_STEP = "timestamp"
INTEGRATION_MODES = (FIXED_STEP, TIMESTAMP_STEP)

Listener = Callable[[TimerEvent], None]


# ── Exceptions ────────────────────────────────────────────────────────────────

class InvariantViolation(RuntimeError):
    """Raised when the timer reaches FINISHED without both timestamps set."""


# ── Configuration ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TimerConfig:
    """Tunables for onset detection, integration and the finish line."""

    motion_threshold: float = 0.1          # m/s²
    finish_threshold: float = 60.0         # km/h
    sample_interval_seconds: float = 0.01  # 10 ms
    unit_conversion: float = 3.6           # m/s → km/h
    integration: str = FIXED_STEP

    def __post_init__(self) -> None:
        if self.motion_threshold < 0:
            raise ValueError(f"motion_threshold must be >= 0, got {self.motion_threshold}")
        if self.finish_threshold < 0:
            raise ValueError(f"finish_threshold must be >= 0, got {self.finish_threshold}")
        if self.sample_interval_seconds <= 0:
            raise ValueError(
                f"sample_interval_seconds must be > 0, got {self.sample_interval_seconds}"
            )
        if self.unit_conversion <= 0:
            raise ValueError(f"unit_conversion must be > 0, got {self.unit_conversion}")
        if self.integration not in INTEGRATION_MODES:
            raise ValueError(
                f"integration must be one of {INTEGRATION_MODES}, got {self.integration!r}"
            )

    @classmethod
    def from_settings(cls, settings) -> "TimerConfig":
        """Build a TimerConfig from a launchtimer.config.Settings instance."""
        return cls(
            motion_threshold=settings.motion_threshold,
            finish_threshold=settings.finish_threshold,
            sample_interval_seconds=settings.sample_interval_seconds,
            unit_conversion=settings.unit_conversion,
            integration=settings.integration,
        )


# ── Main class ────────────────────────────────────────────────────────────────

class MotionTimer:
    """
    Onset → speed integral → finish detector for one session.

    Usage:
        timer = MotionTimer()
        timer.subscribe(print)
        for sample in samples:
            timer.feed(sample)
        if timer.state is RunState.FINISHED:
            print(timer.duration)
            timer.reset()
    """

    def __init__(self, config: Optional[TimerConfig] = None):
        self.config = config or TimerConfig()
        self._listeners: List[Listener] = []
        self._state = RunState.IDLE
        self._speed = 0.0
        self._start_timestamp: Optional[float] = None
        self._finish_timestamp: Optional[float] = None
        self._last_timestamp: Optional[float] = None
        self.stale_samples = 0
        self.rejected_samples = 0

    # ── Read-only state ───────────────────────────────────────────────────────

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def start_timestamp(self) -> Optional[float]:
        return self._start_timestamp

    @property
    def finish_timestamp(self) -> Optional[float]:
        return self._finish_timestamp

    @property
    def duration(self) -> Optional[float]:
        """Seconds from onset to finish, or None unless FINISHED."""
        if self._state is not RunState.FINISHED:
            return None
        return self._require_duration()

    # ── Observers ─────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a listener (does not raise if it was never subscribed)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ── Samples ───────────────────────────────────────────────────────────────

    def feed(self, sample: AccelSample) -> List[TimerEvent]:
        return self.on_sample(sample.ax, sample.ay, sample.timestamp)

    def on_sample(self, ax: float, ay: float, now: float) -> List[TimerEvent]:
        """
        Process one accelerometer sample.

        NaN or infinite readings are dropped and counted in rejected_samples.

        Args:
            ax: acceleration along x, m/s²
            ay: acceleration along y, m/s²
            now: sample timestamp, monotonic seconds

        Returns:
            Events emitted by this sample, in order (empty list if none).

        Raises:
            InvariantViolation: if FINISHED is reached without a start timestamp.
        """
        if self._state is RunState.FINISHED:
            self.stale_samples += 1
            logger.debug("Stale sample at t=%.3f ignored (run already finished)", now)
            return []

        magnitude = math.sqrt(ax * ax + ay * ay)
        if not (math.isfinite(magnitude) and math.isfinite(now)):
            self.rejected_samples += 1
            logger.debug("Non-finite sample ignored (ax=%r, ay=%r, t=%r)", ax, ay, now)
            return []

        events: List[TimerEvent] = []

        if self._state is RunState.IDLE:
            if magnitude <= self.config.motion_threshold:
                return []
            self._state = RunState.ACTIVE
            self._start_timestamp = now
            logger.info("Motion onset at t=%.3f (|a|=%.3f m/s²)", now, magnitude)
            events.append(StateChanged(RunState.ACTIVE))

        events.extend(self._integrate(magnitude, now))
        self._dispatch(events)
        return events

    def reset(self) -> List[TimerEvent]:
        """
        Return to IDLE: speed 0, both timestamps cleared.

        Returns:
            [StateChanged(IDLE)] if the state changed, else an empty list.
        """
        previous = self._state
        self._state = RunState.IDLE
        self._speed = 0.0
        self._start_timestamp = None
        self._finish_timestamp = None
        self._last_timestamp = None
        self.stale_samples = 0
        self.rejected_samples = 0

        if previous is RunState.IDLE:
            return []
        logger.info("Timer reset from %s", previous.value)
        events: List[TimerEvent] = [StateChanged(RunState.IDLE)]
        self._dispatch(events)
        return events

    # ─── Internal helpers ─────────────────────────────────────────────────────

    def _step(self, now: float) -> float:
        if self.config.integration == FIXED_STEP or self._last_timestamp is None:
            return self.config.sample_interval_seconds
        # Out-of-order timestamps contribute nothing; speed never decreases
        return max(0.0, now - self._last_timestamp)

    def _integrate(self, magnitude: float, now: float) -> List[TimerEvent]:
        step = self._step(now)
        self._last_timestamp = now
        self._speed += magnitude * step * self.config.unit_conversion
        logger.debug("t=%.3f speed=%.4f", now, self._speed)

        events: List[TimerEvent] = [SpeedUpdated(self._speed)]
        if self._speed > self.config.finish_threshold:
            events.extend(self._finish(now))
        return events

    def _finish(self, now: float) -> List[TimerEvent]:
        self._finish_timestamp = now
        self._state = RunState.FINISHED
        duration = self._require_duration()
        logger.info(
            "Run finished at t=%.3f: %.3f s to %.1f", now, duration, self.config.finish_threshold
        )
        return [StateChanged(RunState.FINISHED), RunFinished(duration)]

    def _require_duration(self) -> float:
        if self._start_timestamp is None or self._finish_timestamp is None:
            raise InvariantViolation(
                f"Timer is {self._state.value} without both timestamps "
                f"(start={self._start_timestamp}, finish={self._finish_timestamp})"
            )
        return self._finish_timestamp - self._start_timestamp

    def _dispatch(self, events: List[TimerEvent]) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)
