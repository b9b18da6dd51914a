"""
Sample sources: the boundary between the host platform and MotionTimer.

Real acquisition (a phone's accelerometer, a serial IMU) lives outside this
package. What lives here is the contract those collaborators honour plus two
sources that need no hardware:

  - ReplaySource replays recorded or synthetic samples, optionally paced at
    the nominal sample interval with asyncio.sleep.
  - constant_acceleration() builds a synthetic launch along the x axis.

CSV recordings use a header row and one sample per line:

    timestamp,ax,ay
    0.00,0.01,0.02
    0.01,19.8,2.1
"""
import asyncio
import csv
from pathlib import Path
from typing import AsyncIterator, Iterable, List

from launchtimer.motion.events import AccelSample

DEFAULT_INTERVAL_SECONDS = 0.01
CSV_COLUMNS = ("timestamp", "ax", "ay")


# ── Exceptions ────────────────────────────────────────────────────────────────

class SensorUnavailableError(RuntimeError):
    """Raised by start() when the source cannot deliver samples."""


# ── Sources ───────────────────────────────────────────────────────────────────

class SampleSource:
    """
    Base class for accelerometer streams.

    Usage:
        source.start()              # may raise SensorUnavailableError
        async for sample in source:
            ...
        source.stop()               # ends iteration at the next sample
    """

    def __init__(self, interval_seconds: float = DEFAULT_INTERVAL_SECONDS):
        self.interval_seconds = interval_seconds
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def __aiter__(self) -> AsyncIterator[AccelSample]:
        if not self._running:
            raise RuntimeError("Sample source must be started before iterating")
        return self._iter_samples()

    def _iter_samples(self) -> AsyncIterator[AccelSample]:
        raise NotImplementedError


class ReplaySource(SampleSource):
    """Replays a finite list of samples, optionally in real time."""

    def __init__(
        self,
        samples: Iterable[AccelSample],
        pace: bool = False,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        super().__init__(interval_seconds=interval_seconds)
        self._samples = list(samples)
        self._pace = pace

    def __len__(self) -> int:
        return len(self._samples)

    def start(self) -> None:
        """
        Raises:
            SensorUnavailableError: if there is nothing to replay.
        """
        if not self._samples:
            raise SensorUnavailableError("Replay source has no samples to deliver")
        super().start()

    async def _iter_samples(self) -> AsyncIterator[AccelSample]:
        for i, sample in enumerate(self._samples):
            if self._pace and i > 0:
                await asyncio.sleep(self.interval_seconds)
            if not self._running:
                return
            yield sample


# ── Sample builders ───────────────────────────────────────────────────────────

def load_samples_csv(path: Path) -> List[AccelSample]:
    """
    Read a `timestamp,ax,ay` CSV recording.

    Args:
        path: CSV file with a header row.

    Returns:
        Samples in file order.

    Raises:
        ValueError: if a column is missing or a row does not parse as numbers.
    """
    samples = []
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        missing = [c for c in CSV_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")

        for row in reader:
            try:
                samples.append(
                    AccelSample(
                        ax=float(row["ax"]),
                        ay=float(row["ay"]),
                        timestamp=float(row["timestamp"]),
                    )
                )
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{path}:{reader.line_num}: bad sample row {row!r}") from exc
    return samples


def constant_acceleration(
    magnitude: float,
    count: int,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    start: float = 0.0,
    idle_samples: int = 0,
    idle_magnitude: float = 0.0,
) -> List[AccelSample]:
    """
    Synthetic launch: `idle_samples` readings of `idle_magnitude` followed by
    `count` readings of `magnitude`, all along the x axis, `interval` apart.
    """
    total = idle_samples + count
    return [
        AccelSample(
            ax=idle_magnitude if i < idle_samples else magnitude,
            ay=0.0,
            timestamp=start + i * interval,
        )
        for i in range(total)
    ]
