"""Tests for sample sources and sample builders."""
from unittest.mock import AsyncMock, patch

import pytest

from launchtimer.host.sources import (
    ReplaySource,
    SampleSource,
    SensorUnavailableError,
    constant_acceleration,
    load_samples_csv,
)
from launchtimer.motion.events import AccelSample


async def collect(source):
    return [s async for s in source]


class TestAccelSample:
    def test_magnitude(self):
        assert AccelSample(ax=3.0, ay=4.0, timestamp=0.0).magnitude == pytest.approx(5.0)

    def test_magnitude_of_negative_axes(self):
        assert AccelSample(ax=-6.0, ay=-8.0, timestamp=0.0).magnitude == pytest.approx(10.0)


class TestReplaySource:
    def test_start_without_samples_raises(self):
        source = ReplaySource([])
        with pytest.raises(SensorUnavailableError):
            source.start()
        assert not source.is_running

    def test_iterating_before_start_raises(self):
        source = ReplaySource(constant_acceleration(1.0, 3))
        with pytest.raises(RuntimeError):
            source.__aiter__()

    @pytest.mark.asyncio
    async def test_yields_all_samples_in_order(self):
        samples = constant_acceleration(1.0, 5)
        source = ReplaySource(samples)
        source.start()
        assert await collect(source) == samples

    @pytest.mark.asyncio
    async def test_stop_ends_iteration(self):
        source = ReplaySource(constant_acceleration(1.0, 10))
        source.start()
        seen = []
        async for sample in source:
            seen.append(sample)
            if len(seen) == 3:
                source.stop()
        assert len(seen) == 3
        assert not source.is_running

    @pytest.mark.asyncio
    async def test_pace_sleeps_between_samples(self):
        source = ReplaySource(constant_acceleration(1.0, 4), pace=True, interval_seconds=0.01)
        source.start()
        with patch("launchtimer.host.sources.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            await collect(source)
        assert mock_sleep.await_count == 3
        mock_sleep.assert_awaited_with(0.01)

    @pytest.mark.asyncio
    async def test_no_sleep_without_pace(self):
        source = ReplaySource(constant_acceleration(1.0, 4))
        source.start()
        with patch("launchtimer.host.sources.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            await collect(source)
        mock_sleep.assert_not_awaited()

    def test_len(self):
        assert len(ReplaySource(constant_acceleration(1.0, 7))) == 7


class TestBaseSource:
    def test_base_source_has_no_samples(self):
        source = SampleSource()
        source.start()
        with pytest.raises(NotImplementedError):
            source.__aiter__()


class TestLoadSamplesCsv:
    def test_loads_rows_in_order(self, csv_recording):
        samples = load_samples_csv(csv_recording)
        assert len(samples) == 103
        assert samples[0] == AccelSample(ax=0.01, ay=0.02, timestamp=0.0)
        assert samples[3].ax == 20.0
        assert samples[3].timestamp == pytest.approx(0.03)

    def test_missing_column_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("timestamp,ax\n0.0,1.0\n")
        with pytest.raises(ValueError, match="ay"):
            load_samples_csv(path)

    def test_non_numeric_row_reports_line(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("timestamp,ax,ay\n0.00,1.0,0.0\n0.01,oops,0.0\n")
        with pytest.raises(ValueError, match=":3:"):
            load_samples_csv(path)

    def test_short_row_raises(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("timestamp,ax,ay\n0.00,1.0\n")
        with pytest.raises(ValueError):
            load_samples_csv(path)

    def test_header_only_gives_empty_list(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("timestamp,ax,ay\n")
        assert load_samples_csv(path) == []


class TestConstantAcceleration:
    def test_count_and_spacing(self):
        samples = constant_acceleration(20.0, 5, interval=0.02, start=1.0)
        assert len(samples) == 5
        assert [s.timestamp for s in samples] == pytest.approx([1.0, 1.02, 1.04, 1.06, 1.08])
        assert all(s.ax == 20.0 and s.ay == 0.0 for s in samples)

    def test_idle_prefix(self):
        samples = constant_acceleration(20.0, 2, idle_samples=3, idle_magnitude=0.05)
        assert [s.ax for s in samples] == [0.05, 0.05, 0.05, 20.0, 20.0]
