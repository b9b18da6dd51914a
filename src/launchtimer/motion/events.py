"""
RunState, AccelSample and the event values emitted by MotionTimer.

Events are plain frozen dataclasses: the timer returns them from on_sample()
and dispatches them to subscribed listeners. Nothing here formats or renders;
see launchtimer.motion.formatting for display strings.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


class RunState(str, Enum):
    IDLE = "idle"          # waiting for motion onset, speed pinned at 0
    ACTIVE = "active"      # run in progress, speed accumulating
    FINISHED = "finished"  # timestamps + duration fixed until reset


@dataclass(frozen=True)
class AccelSample:
    """
    One accelerometer reading.
    Nominally delivered every 10 ms (100 Hz) by the host's sample source.
    """

    ax: float         # m/s²
    ay: float         # m/s²
    timestamp: float  # monotonic seconds

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.ax * self.ax + self.ay * self.ay)


@dataclass(frozen=True)
class StateChanged:
    state: RunState


@dataclass(frozen=True)
class SpeedUpdated:
    speed: float  # km/h with the default unit conversion


@dataclass(frozen=True)
class RunFinished:
    duration: float  # seconds, finish_timestamp - start_timestamp


TimerEvent = Union[StateChanged, SpeedUpdated, RunFinished]
