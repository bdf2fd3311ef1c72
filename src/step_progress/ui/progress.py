"""Progress tracking utilities."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, TypeVar, Union

from ..core.errors import ConfigurationError, StateError
from ..core.process import ProcessState
from ..core.stopwatch import Clock, MaybeDuration, MaybeTimestamp, RuntimeEstimate, RuntimeEstimator
from .bar import BarRenderer, Fidelity, round_half_up
from .output import ConsoleSink, OutputSink, detect_fidelity

# Configure logging
logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LABEL = "Progress"
DEFAULT_BLOCK_COUNT = 30


class Mode(Enum):
    """Amount of information shown by a tracker."""
    SIMPLE = "simple"
    REGULAR = "regular"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class FrameData:
    """Everything a layout needs to render one frame."""
    label: str
    current_step: int
    total_steps: int
    bar: str
    estimate: RuntimeEstimate

    @property
    def percentage(self) -> float:
        return self.current_step / self.total_steps * 100


def format_percentage(percentage: float) -> str:
    """Format a percentage right-justified to three digits, e.g. ``' 55%'``.

    Halves round up, as the bar does.
    """
    return f"{round_half_up(percentage):3d}%"


class SimpleLayout:
    """``<percentage>%|<bar>|``"""

    def render(self, frame: FrameData) -> str:
        return f"{format_percentage(frame.percentage)}{frame.bar}"


class RegularLayout(SimpleLayout):
    """``<label>: <percentage>%|<bar>|[<current>/<total>]``"""

    def render(self, frame: FrameData) -> str:
        steps_ratio = f"{frame.current_step}/{frame.total_steps}"
        return f"{frame.label}: {super().render(frame)}[{steps_ratio}]"


class AdvancedLayout(RegularLayout):
    """Regular layout followed by ``[<begin>|<finish>|<average per step>]``."""

    def render(self, frame: FrameData) -> str:
        return f"{super().render(frame)} {frame.estimate.render()}"


LAYOUTS: Dict[Mode, SimpleLayout] = {
    Mode.SIMPLE: SimpleLayout(),
    Mode.REGULAR: RegularLayout(),
    Mode.ADVANCED: AdvancedLayout(),
}


class ProgressTracker:
    """Tracks and displays progress for long-running operations.

    The tracker owns the output line between its creation and ``close()``;
    other writes to the same sink in the meantime corrupt the display. Use it
    as a context manager so the line is released even when the tracked
    operation fails::

        with ProgressTracker.advanced(len(items), label="Copying") as tracker:
            for item in items:
                copy(item)
                tracker.advance()

    A tracker is not thread-safe; serialize ``advance`` calls when sharing one.
    """

    def __init__(
        self,
        total_steps: int,
        label: str = DEFAULT_LABEL,
        block_count: int = DEFAULT_BLOCK_COUNT,
        mode: Union[Mode, str] = Mode.REGULAR,
        sink: Optional[OutputSink] = None,
        fidelity: Optional[Fidelity] = None,
        clock: Clock = datetime.now,
    ):
        """Initialize progress tracker and display its first frame.

        Args:
            total_steps: Total number of steps to process
            label: Tracker label, shown in regular and advanced modes
            block_count: Width of the progress bar body in characters
            mode: Simple, regular or advanced display
            sink: Output destination, a rich console sink by default
            fidelity: Bar fidelity, detected from the terminal when omitted
            clock: Callable returning the current wall-clock time

        Raises:
            ConfigurationError: If any argument is invalid
        """
        if label is None:
            raise ConfigurationError("Tracker label must be provided")
        if not isinstance(label, str):
            raise ConfigurationError(f"Tracker label must be a string, got {label!r}")

        try:
            self.mode = Mode(mode)
        except ValueError:
            raise ConfigurationError(f"Unknown tracker mode: {mode!r}") from None

        self.label = label
        self._sink = sink if sink is not None else ConsoleSink()

        if fidelity is None:
            fidelity = detect_fidelity(getattr(self._sink, "console", None))

        self._process = ProcessState(total_steps)
        self._bar = BarRenderer(self._process, block_count, fidelity)
        self._stopwatch = RuntimeEstimator(self._process, clock)
        self._layout = LAYOUTS[self.mode]
        self._closed = False

        logger.debug(
            f"Tracker created: mode={self.mode.value}, total_steps={total_steps}, "
            f"block_count={block_count}, fidelity={self._bar.fidelity.value}"
        )
        self._emit()

    @classmethod
    def simple(cls, total_steps: int, block_count: int = DEFAULT_BLOCK_COUNT, **options) -> "ProgressTracker":
        """Create a tracker showing only the percentage and the bar."""
        return cls(total_steps, "", block_count, Mode.SIMPLE, **options)

    @classmethod
    def regular(cls, total_steps: int, label: str = DEFAULT_LABEL,
                block_count: int = DEFAULT_BLOCK_COUNT, **options) -> "ProgressTracker":
        """Create a tracker adding a label and step ratio to the bar."""
        return cls(total_steps, label, block_count, Mode.REGULAR, **options)

    @classmethod
    def advanced(cls, total_steps: int, label: str = DEFAULT_LABEL,
                 block_count: int = DEFAULT_BLOCK_COUNT, **options) -> "ProgressTracker":
        """Create a tracker adding runtime statistics to the regular display."""
        return cls(total_steps, label, block_count, Mode.ADVANCED, **options)

    @property
    def current_step(self) -> int:
        return self._process.current_step

    @property
    def total_steps(self) -> int:
        return self._process.total_steps

    @property
    def is_complete(self) -> bool:
        return self._process.is_complete

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def runtime_begin(self) -> datetime:
        return self._stopwatch.runtime_begin

    @property
    def estimated_remaining(self) -> MaybeDuration:
        return self._stopwatch.estimated_remaining

    @property
    def estimated_finish(self) -> MaybeTimestamp:
        return self._stopwatch.estimated_finish

    @property
    def average_time_per_step(self) -> MaybeDuration:
        return self._stopwatch.average_time_per_step

    def advance(self, steps: int = 1) -> None:
        """Record performed steps and redraw the tracker line.

        Args:
            steps: Steps performed since the last update

        Raises:
            StateError: If steps is negative or the tracker is closed
        """
        if self._closed:
            raise StateError("Tracker is already closed")

        self._process.advance(steps)
        self._emit()

    def render(self) -> str:
        """Render the current frame without writing it."""
        frame = FrameData(
            label=self.label,
            current_step=self._process.current_step,
            total_steps=self._process.total_steps,
            bar=self._bar.render(),
            estimate=self._stopwatch.snapshot(),
        )
        return self._layout.render(frame)

    def close(self) -> None:
        """Leave the tracker line. Further calls are ignored."""
        if self._closed:
            return

        self._sink.finish_line()
        self._closed = True
        logger.debug(f"Tracker closed at step {self.current_step}/{self.total_steps}")

    def _emit(self) -> None:
        self._sink.write_frame(self.render())

    def __enter__(self) -> "ProgressTracker":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __str__(self) -> str:
        return self.render()


def track(
    iterable: Iterable[T],
    total_steps: Optional[int] = None,
    label: str = DEFAULT_LABEL,
    mode: Union[Mode, str] = Mode.REGULAR,
    **options
) -> Iterator[T]:
    """Yield items from iterable, advancing a tracker after each one.

    Args:
        iterable: Items to process
        total_steps: Number of items, taken from len(iterable) when omitted
        label: Tracker label
        mode: Tracker display mode
        **options: Further ProgressTracker arguments

    Yields:
        Items of iterable

    Raises:
        ConfigurationError: If total_steps is omitted and iterable has no length
    """
    if total_steps is None:
        try:
            total_steps = len(iterable)
        except TypeError:
            raise ConfigurationError("total_steps is required for iterables without a length") from None

    with ProgressTracker(total_steps, label, mode=mode, **options) as tracker:
        for item in iterable:
            yield item
            tracker.advance()
