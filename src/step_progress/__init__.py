"""Step Progress - terminal progress tracking for step-driven operations."""

__version__ = "0.1.0"

from step_progress.core.errors import ProgressError, ConfigurationError, StateError
from step_progress.core.process import ProcessState
from step_progress.core.stopwatch import RuntimeEstimator, RuntimeEstimate, UNSET, Unset
from step_progress.ui.bar import BarRenderer, Fidelity
from step_progress.ui.output import OutputSink, StreamSink, ConsoleSink, detect_fidelity
from step_progress.ui.progress import Mode, ProgressTracker, track

__all__ = [
    "__version__",
    "ProgressError",
    "ConfigurationError",
    "StateError",
    "ProcessState",
    "RuntimeEstimator",
    "RuntimeEstimate",
    "UNSET",
    "Unset",
    "BarRenderer",
    "Fidelity",
    "OutputSink",
    "StreamSink",
    "ConsoleSink",
    "detect_fidelity",
    "Mode",
    "ProgressTracker",
    "track",
]
