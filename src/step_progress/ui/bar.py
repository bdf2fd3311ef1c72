"""Text progress bar with sub-character resolution.

Every block of the bar body is split into eight units. In smooth fidelity a
partially filled block is drawn with one of the Unicode glyphs U+258F..U+2589,
which makes the bar move eight times more often than a whole-block bar.
Terminals without those glyphs use coarse fidelity, built only from U+2588.
"""

import math
from enum import Enum

from ..core.errors import ConfigurationError, StateError
from ..core.process import ProcessState

BAR_BRACKET = "|"
EMPTY_BLOCK = " "
FILLED_BLOCK = "█"
# Indexed by the number of filled eighths minus one.
PARTIAL_BLOCKS = ("▏", "▎", "▍", "▌", "▋", "▊", "▉")

UNITS_PER_BLOCK = 8


class Fidelity(Enum):
    """Rendering resolution of the bar body."""
    SMOOTH = "smooth"
    COARSE = "coarse"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties rounded up."""
    return int(math.floor(value + 0.5))


def compose_bar(filled_units: int, block_count: int, fidelity: Fidelity) -> str:
    """Build a bracketed bar from a count of filled eighths.

    Args:
        filled_units: Number of filled eighths of a block
        block_count: Width of the bar body in characters
        fidelity: Whether partial glyphs may be used

    Returns:
        Bar string of width block_count + 2
    """
    filled_blocks, remainder = divmod(filled_units, UNITS_PER_BLOCK)

    if filled_blocks >= block_count:
        body = FILLED_BLOCK * block_count
    elif fidelity is Fidelity.COARSE or remainder == 0:
        body = FILLED_BLOCK * filled_blocks + EMPTY_BLOCK * (block_count - filled_blocks)
    else:
        body = (
            FILLED_BLOCK * filled_blocks
            + PARTIAL_BLOCKS[remainder - 1]
            + EMPTY_BLOCK * (block_count - filled_blocks - 1)
        )

    return f"{BAR_BRACKET}{body}{BAR_BRACKET}"


def render_bar(current_step: int, total_steps: int, block_count: int,
               fidelity: Fidelity = Fidelity.SMOOTH) -> str:
    """Render a bar for the given step counts without a tracked process.

    Raises:
        ConfigurationError: If a count is out of range
    """
    _validate_block_count(block_count)
    if total_steps <= 0:
        raise ConfigurationError(f"Invalid number of process steps: equal to {total_steps}")
    if current_step < 0:
        raise ConfigurationError(f"Invalid current step: equal to {current_step}")

    steps_per_unit = total_steps / (block_count * UNITS_PER_BLOCK)
    return compose_bar(round_half_up(current_step / steps_per_unit), block_count, fidelity)


class BarRenderer:
    """Progress bar bound to a tracked process."""

    def __init__(self, process: ProcessState, block_count: int, fidelity: Fidelity = Fidelity.SMOOTH):
        """Initialize bar renderer.

        Args:
            process: Process in its initial state
            block_count: Width of the bar body in characters
            fidelity: Smooth or coarse rendering

        Raises:
            ConfigurationError: If block_count is invalid or no process is given
            StateError: If the process already advanced
        """
        if process is None:
            raise ConfigurationError("Process to track must be provided")
        if process.is_started:
            raise StateError("Provided process is not in its initial state")
        _validate_block_count(block_count)

        self._process = process
        self.block_count = block_count
        try:
            self.fidelity = Fidelity(fidelity)
        except ValueError:
            raise ConfigurationError(f"Unknown bar fidelity: {fidelity!r}") from None

        # Steps represented by one eighth of a block
        self.steps_per_unit = process.total_steps / (block_count * UNITS_PER_BLOCK)

    def filled_units(self) -> int:
        return round_half_up(self._process.current_step / self.steps_per_unit)

    def render(self) -> str:
        return compose_bar(self.filled_units(), self.block_count, self.fidelity)

    def __str__(self) -> str:
        return self.render()


def _validate_block_count(block_count: int) -> None:
    if isinstance(block_count, bool) or not isinstance(block_count, int):
        raise ConfigurationError(f"Number of blocks must be an integer, got {block_count!r}")
    if block_count <= 0:
        raise ConfigurationError(f"Invalid number of blocks: equal to {block_count}")
