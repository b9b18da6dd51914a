"""Shared test fixtures."""
from typing import List

import pytest

from launchtimer.motion.events import TimerEvent
from launchtimer.motion.timer import MotionTimer, TimerConfig


@pytest.fixture(name="config")
def config_fixture() -> TimerConfig:
    """Reference tunables: 0.1 m/s² onset, 60 km/h finish, 10 ms step, m/s → km/h."""
    return TimerConfig(
        motion_threshold=0.1,
        finish_threshold=60.0,
        sample_interval_seconds=0.01,
        unit_conversion=3.6,
    )


@pytest.fixture(name="timer")
def timer_fixture(config: TimerConfig) -> MotionTimer:
    return MotionTimer(config)


@pytest.fixture(name="recorded")
def recorded_fixture(timer: MotionTimer) -> List[TimerEvent]:
    """Every event the timer dispatches, in order."""
    events: List[TimerEvent] = []
    timer.subscribe(events.append)
    return events


@pytest.fixture(name="csv_recording")
def csv_recording_fixture(tmp_path):
    """A short recording: 3 idle rows, then a hard launch along x."""
    path = tmp_path / "run.csv"
    rows = ["timestamp,ax,ay"]
    rows += [f"{i * 0.01:.2f},0.01,0.02" for i in range(3)]
    rows += [f"{(i + 3) * 0.01:.2f},20.0,0.0" for i in range(100)]
    path.write_text("\n".join(rows) + "\n")
    return path
