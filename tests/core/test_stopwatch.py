"""Tests for runtime measurements."""

import pytest
from datetime import datetime, timedelta

from step_progress.core.errors import ConfigurationError, StateError
from step_progress.core.process import ProcessState
from step_progress.core.stopwatch import (
    RuntimeEstimator,
    RuntimeEstimate,
    UNSET,
    Unset,
    format_clock_time,
    format_duration
)

START = datetime(2024, 1, 15, 14, 2, 30)


class FakeClock:
    """Clock returning a manually advanced time."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def process():
    return ProcessState(100)


@pytest.fixture
def estimator(process, clock):
    return RuntimeEstimator(process, clock=clock)


class TestUnset:
    """Test the unset marker."""

    def test_singleton(self):
        """Unset() always returns the same marker."""
        assert Unset() is UNSET

    def test_falsy_and_distinct_from_zero(self):
        """UNSET is falsy but never equal to a zero duration."""
        assert not UNSET
        assert UNSET != timedelta(0)
        assert repr(UNSET) == "UNSET"


class TestFormatting:
    """Test textual rendering of times and durations."""

    def test_clock_time(self):
        """Timestamps render as 24-hour HH:MM."""
        assert format_clock_time(datetime(2024, 1, 1, 21, 5, 59)) == "21:05"
        assert format_clock_time(datetime(2024, 1, 1, 0, 0)) == "00:00"

    def test_clock_time_unset(self):
        """Unset timestamp renders as placeholder."""
        assert format_clock_time(UNSET) == "--:--"

    def test_duration(self):
        """Durations render as HH:MM:SS."""
        assert format_duration(timedelta(seconds=0)) == "00:00:00"
        assert format_duration(timedelta(seconds=1)) == "00:00:01"
        assert format_duration(timedelta(minutes=3, seconds=7)) == "00:03:07"
        assert format_duration(timedelta(hours=2, minutes=30)) == "02:30:00"

    def test_duration_hours_unbounded(self):
        """Hours are not wrapped at a day."""
        assert format_duration(timedelta(hours=123, minutes=4, seconds=5)) == "123:04:05"

    def test_duration_drops_fractions(self):
        """Fractional seconds are truncated."""
        assert format_duration(timedelta(seconds=1.999)) == "00:00:01"

    def test_negative_duration(self):
        """Negative durations keep their sign."""
        assert format_duration(timedelta(seconds=-65)) == "-00:01:05"

    def test_duration_unset(self):
        """Unset duration renders as placeholder."""
        assert format_duration(UNSET) == "--:--:--"


class TestRuntimeEstimatorInitialization:
    """Test RuntimeEstimator construction."""

    def test_records_runtime_begin(self, estimator):
        """Runtime begins at construction."""
        assert estimator.runtime_begin == START

    def test_fields_unset_initially(self, estimator):
        """Derived measurements are unset before any progress."""
        assert estimator.average_time_per_step is UNSET
        assert estimator.estimated_remaining is UNSET
        assert estimator.estimated_finish is UNSET

    def test_rejects_started_process(self, clock):
        """Estimator requires a process in its initial state."""
        process = ProcessState(10)
        process.advance(1)
        with pytest.raises(StateError):
            RuntimeEstimator(process, clock=clock)

    def test_rejects_missing_process(self, clock):
        """A process must be given."""
        with pytest.raises(ConfigurationError):
            RuntimeEstimator(None, clock=clock)

    def test_leaves_registration_window_open(self, process, clock):
        """Other subscribers can still register after the estimator."""
        estimator = RuntimeEstimator(process, clock=clock)
        seen = []
        process.subscribe(lambda: seen.append(estimator.average_time_per_step))

        clock.tick(4)
        process.advance(2)

        assert seen == [timedelta(seconds=2)]


class TestRuntimeEstimatorUpdates:
    """Test measurement updates on advance."""

    def test_remains_unset_after_zero_advance(self, process, estimator, clock):
        """Zero advance leaves measurements unset."""
        clock.tick(5)
        process.advance(0)
        assert estimator.average_time_per_step is UNSET
        assert not estimator.snapshot().is_set

    def test_linear_estimate(self, process, estimator, clock):
        """Average, remaining and finish follow from elapsed time."""
        clock.tick(10)
        process.advance(10)

        assert estimator.average_time_per_step == timedelta(seconds=1)
        assert estimator.estimated_remaining == timedelta(seconds=90)
        assert estimator.estimated_finish == START + timedelta(seconds=10) + timedelta(seconds=90)

    def test_recomputed_on_each_advance(self, process, estimator, clock):
        """Measurements are recomputed from scratch on every advance."""
        clock.tick(10)
        process.advance(10)
        clock.tick(30)
        process.advance(10)

        assert estimator.average_time_per_step == timedelta(seconds=2)
        assert estimator.estimated_remaining == timedelta(seconds=160)
        assert estimator.estimated_finish == START + timedelta(seconds=40 + 160)

    def test_complete_process_has_no_remaining_time(self, process, estimator, clock):
        """Finished process estimates zero remaining time."""
        clock.tick(50)
        process.advance(100)

        assert estimator.estimated_remaining == timedelta(0)
        assert estimator.estimated_finish == clock.now

    def test_over_progress_yields_negative_remaining(self, process, estimator, clock):
        """Advancing past the total is not clamped."""
        clock.tick(120)
        process.advance(120)

        assert estimator.estimated_remaining == timedelta(seconds=-20)


class TestRuntimeEstimateRendering:
    """Test bracketed text form."""

    def test_render_unset(self, estimator):
        """Unset fields render as placeholders."""
        assert str(estimator) == "[14:02|--:--|--:--:--]"

    def test_render_after_progress(self, process, estimator, clock):
        """Fields render as begin, finish and average per step."""
        clock.tick(10)
        process.advance(10)
        assert str(estimator) == "[14:02|14:04|00:00:01]"

    def test_snapshot_is_immutable(self, estimator):
        """Snapshots cannot be modified."""
        snapshot = estimator.snapshot()
        with pytest.raises(AttributeError):
            snapshot.runtime_begin = START

    def test_estimate_defaults(self):
        """RuntimeEstimate defaults all derived fields to UNSET."""
        estimate = RuntimeEstimate(runtime_begin=START)
        assert estimate.estimated_finish is UNSET
        assert estimate.render() == "[14:02|--:--|--:--:--]"
