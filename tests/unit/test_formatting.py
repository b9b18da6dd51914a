"""Tests for speed / duration / event display strings."""
import pytest

from launchtimer.motion.events import RunFinished, RunState, SpeedUpdated, StateChanged
from launchtimer.motion.formatting import describe_event, format_duration, format_speed


class TestFormatSpeed:
    @pytest.mark.parametrize("speed,expected", [
        (0.0, "0.0 km/h"),
        (0.0072, "0.0 km/h"),
        (60.48, "60.0 km/h"),
        (61.2, "61.0 km/h"),
        (99.7, "100.0 km/h"),
    ])
    def test_rounds_to_whole_units(self, speed, expected):
        assert format_speed(speed) == expected

    def test_custom_unit(self):
        assert format_speed(37.4, unit="mph") == "37.0 mph"


class TestFormatDuration:
    def test_two_decimals(self):
        assert format_duration(0.83) == "0.83 seconds"

    def test_long_run(self):
        assert format_duration(12.5) == "12.50 seconds"

    def test_zero(self):
        assert format_duration(0.0) == "0.00 seconds"


class TestDescribeEvent:
    def test_state_changed(self):
        assert describe_event(StateChanged(RunState.ACTIVE)) == "state → active"

    def test_speed_updated(self):
        assert describe_event(SpeedUpdated(42.2)) == "speed 42.0 km/h"

    def test_run_finished(self):
        assert describe_event(RunFinished(4.371)) == "finished in 4.37 seconds"

    def test_unknown_event_raises(self):
        with pytest.raises(TypeError):
            describe_event("not an event")
