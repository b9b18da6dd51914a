"""
Replay accelerometer samples through a TimerSession and report the launch time.

Usage:
    python -m launchtimer replay run.csv
    python -m launchtimer replay run.csv --pace --integration timestamp
    python -m launchtimer simulate --magnitude 20 --samples 120 --idle 10

Thresholds and the integration step come from Settings (LAUNCHTIMER_* env
vars or .env); --integration overrides the configured mode.
"""
import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from launchtimer.config import get_settings
from launchtimer.host.session import RunResult, TimerSession
from launchtimer.host.sources import (
    ReplaySource,
    SensorUnavailableError,
    constant_acceleration,
    load_samples_csv,
)
from launchtimer.motion.events import AccelSample, SpeedUpdated, TimerEvent
from launchtimer.motion.formatting import describe_event, format_duration, format_speed
from launchtimer.motion.timer import INTEGRATION_MODES, TimerConfig

logger = logging.getLogger(__name__)


def _log_event(event: TimerEvent) -> None:
    level = logging.DEBUG if isinstance(event, SpeedUpdated) else logging.INFO
    logger.log(level, "%s", describe_event(event))


async def _replay(
    samples: List[AccelSample],
    config: TimerConfig,
    pace: bool = False,
) -> Optional[RunResult]:
    session = TimerSession(config=config)
    session.timer.subscribe(_log_event)
    source = ReplaySource(samples, pace=pace, interval_seconds=config.sample_interval_seconds)
    return await session.run(source)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--integration",
        choices=INTEGRATION_MODES,
        default=None,
        help="Integration step: fixed interval or timestamp deltas (default: from settings)",
    )
    common.add_argument(
        "--pace",
        action="store_true",
        help="Deliver samples in real time at the nominal interval",
    )

    parser = argparse.ArgumentParser(
        prog="launchtimer",
        description="Measure launch time from accelerometer samples",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser(
        "replay", parents=[common], help="Replay a timestamp,ax,ay CSV recording"
    )
    replay.add_argument("path", type=Path, help="CSV file to replay")

    simulate = sub.add_parser(
        "simulate", parents=[common], help="Replay a synthetic constant-acceleration launch"
    )
    simulate.add_argument(
        "--magnitude",
        type=float,
        default=20.0,
        help="Acceleration during the launch in m/s² (default: 20.0)",
    )
    simulate.add_argument(
        "--samples",
        type=int,
        default=120,
        help="Number of launch samples (default: 120)",
    )
    simulate.add_argument(
        "--idle",
        type=int,
        default=0,
        help="Idle samples before the launch (default: 0)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = TimerConfig.from_settings(settings)
        if args.integration:
            config = replace(config, integration=args.integration)

        if args.command == "replay":
            samples = load_samples_csv(args.path)
        else:
            samples = constant_acceleration(
                args.magnitude,
                args.samples,
                interval=config.sample_interval_seconds,
                idle_samples=args.idle,
            )

        result = asyncio.run(_replay(samples, config, pace=args.pace))
    except (SensorUnavailableError, ValueError, OSError) as exc:
        logger.error("Replay failed: %s", exc)
        return 1

    if result is None:
        logger.warning(
            "No run finished: speed never exceeded %s",
            format_speed(config.finish_threshold),
        )
        return 0

    logger.info(
        "Launch time: %s (%s reached after %d samples)",
        format_duration(result.duration),
        format_speed(result.peak_speed),
        result.samples_seen,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
