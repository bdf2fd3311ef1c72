"""Runtime measurements of a tracked process.

The estimator assumes the tracked process begins when the estimator is
created. Until the first non-zero advance the derived measurements are
``UNSET``, which renders as a dashed placeholder instead of a time.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Union

from .errors import ConfigurationError, StateError
from .process import ProcessState

# Configure logging
logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

OPENING_BRACKET = "["
CLOSING_BRACKET = "]"
FIELD_SEPARATOR = "|"

UNSET_CLOCK_TIME = "--:--"
UNSET_DURATION = "--:--:--"


class Unset:
    """Marker for a measurement that has not been computed yet."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset()

MaybeDuration = Union[timedelta, Unset]
MaybeTimestamp = Union[datetime, Unset]


def format_clock_time(value: MaybeTimestamp) -> str:
    """Format a timestamp as 24-hour ``HH:MM``.

    Args:
        value: Timestamp or UNSET

    Returns:
        Formatted time, or ``--:--`` when unset
    """
    if isinstance(value, Unset):
        return UNSET_CLOCK_TIME
    return value.strftime("%H:%M")


def format_duration(value: MaybeDuration) -> str:
    """Format a duration as ``HH:MM:SS`` with unbounded hours.

    Fractions of a second are dropped.

    Args:
        value: Duration or UNSET

    Returns:
        Formatted duration, or ``--:--:--`` when unset
    """
    if isinstance(value, Unset):
        return UNSET_DURATION

    total_seconds = int(value.total_seconds())
    sign = "-" if total_seconds < 0 else ""
    total_seconds = abs(total_seconds)

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class RuntimeEstimate:
    """Snapshot of runtime measurements."""
    runtime_begin: datetime
    average_time_per_step: MaybeDuration = UNSET
    estimated_remaining: MaybeDuration = UNSET
    estimated_finish: MaybeTimestamp = UNSET

    @property
    def is_set(self) -> bool:
        return not isinstance(self.average_time_per_step, Unset)

    def render(self) -> str:
        """Render as ``[begin|finish|average per step]``."""
        fields = [
            format_clock_time(self.runtime_begin),
            format_clock_time(self.estimated_finish),
            format_duration(self.average_time_per_step),
        ]
        return f"{OPENING_BRACKET}{FIELD_SEPARATOR.join(fields)}{CLOSING_BRACKET}"


class RuntimeEstimator:
    """Derives pace and ETA of a tracked process from elapsed wall-clock time."""

    def __init__(self, process: ProcessState, clock: Clock = datetime.now):
        """Initialize estimator and start measuring.

        Args:
            process: Process in its initial state
            clock: Callable returning the current wall-clock time

        Raises:
            ConfigurationError: If no process is given
            StateError: If the process already advanced
        """
        if process is None:
            raise ConfigurationError("Process to track must be provided")
        if process.is_started:
            raise StateError("Provided process is not in its initial state")

        self._process = process
        self._clock = clock

        self.runtime_begin: datetime = clock()
        self.average_time_per_step: MaybeDuration = UNSET
        self.estimated_remaining: MaybeDuration = UNSET
        self.estimated_finish: MaybeTimestamp = UNSET

        process.subscribe(self._update)
        logger.debug(f"Runtime measurement started at {self.runtime_begin.isoformat()}")

    def _update(self) -> None:
        current_step = self._process.current_step
        if current_step == 0:
            return

        now = self._clock()
        elapsed = now - self.runtime_begin

        self.average_time_per_step = elapsed / current_step
        self.estimated_remaining = (self._process.total_steps - current_step) * self.average_time_per_step
        self.estimated_finish = now + self.estimated_remaining

    def snapshot(self) -> RuntimeEstimate:
        return RuntimeEstimate(
            runtime_begin=self.runtime_begin,
            average_time_per_step=self.average_time_per_step,
            estimated_remaining=self.estimated_remaining,
            estimated_finish=self.estimated_finish,
        )

    def __str__(self) -> str:
        return self.snapshot().render()
