"""
Display strings for speeds, durations and timer events.

The timer itself never formats anything; a display or log layer calls these.
"""
from launchtimer.motion.events import RunFinished, SpeedUpdated, StateChanged, TimerEvent


def format_speed(speed: float, unit: str = "km/h") -> str:
    """
    Format a speed rounded to whole units.

    Returns:
        Formatted string like "61.0 km/h"
    """
    return f"{float(round(speed)):.1f} {unit}"


def format_duration(seconds: float) -> str:
    """
    Format a run duration.

    Returns:
        Formatted string like "4.37 seconds"
    """
    return f"{seconds:.2f} seconds"


def describe_event(event: TimerEvent) -> str:
    if isinstance(event, StateChanged):
        return f"state → {event.state.value}"
    if isinstance(event, SpeedUpdated):
        return f"speed {format_speed(event.speed)}"
    if isinstance(event, RunFinished):
        return f"finished in {format_duration(event.duration)}"
    raise TypeError(f"Unknown timer event: {event!r}")
