"""Output sinks receiving rendered progress frames."""

import sys
from typing import Optional, Protocol, TextIO

from rich.console import Console
from rich.control import Control, ControlType

from .bar import Fidelity

CARRIAGE_RETURN = "\r"


class OutputSink(Protocol):
    """Destination owning a single terminal line while a tracker is active."""

    def write_frame(self, text: str) -> None:
        """Overwrite the current line with text."""
        ...

    def finish_line(self) -> None:
        """Leave the line used for frames."""
        ...


class StreamSink:
    """Writes frames to a text stream using carriage returns."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def write_frame(self, text: str) -> None:
        self.stream.write(f"{CARRIAGE_RETURN}{text}")
        self.stream.flush()

    def finish_line(self) -> None:
        self.stream.write("\n")
        self.stream.flush()

    @property
    def console(self) -> Console:
        """Console over the sink stream, used to inspect its glyph support."""
        return Console(file=self.stream)


class ConsoleSink:
    """Writes frames through a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def write_frame(self, text: str) -> None:
        self.console.control(Control(ControlType.CARRIAGE_RETURN))
        self.console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def finish_line(self) -> None:
        self.console.line()


def detect_fidelity(console: Optional[Console] = None) -> Fidelity:
    """Resolve whether partial block glyphs can be displayed.

    Legacy Windows consoles and non-UTF encodings lack the glyphs.

    Args:
        console: Console to inspect, a new one by default

    Returns:
        Fidelity.SMOOTH when partial glyphs are supported, else Fidelity.COARSE
    """
    console = console or Console()
    encoding = (console.encoding or "").lower()

    if console.legacy_windows or not encoding.startswith("utf"):
        return Fidelity.COARSE
    return Fidelity.SMOOTH
