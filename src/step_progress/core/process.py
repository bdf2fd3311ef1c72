"""Tracked process state."""

import logging
from typing import Callable, List

from .errors import ConfigurationError, StateError

# Configure logging
logger = logging.getLogger(__name__)

Subscriber = Callable[[], None]


class ProcessState:
    """Step counts of a tracked process and the observers of its changes.

    Observers can only be registered while the process is still in its
    initial state, i.e. before the first non-zero advance. Every advance
    updates the step count first and then notifies observers in
    registration order.
    """

    def __init__(self, total_steps: int):
        """Initialize process state.

        Args:
            total_steps: Total number of steps required to complete the process

        Raises:
            ConfigurationError: If total_steps is not a positive integer
        """
        if not _is_int(total_steps):
            raise ConfigurationError(f"Number of process steps must be an integer, got {total_steps!r}")
        if total_steps <= 0:
            raise ConfigurationError(f"Invalid number of process steps: equal to {total_steps}")

        self._total_steps = total_steps
        self._current_step = 0
        self._subscribers: List[Subscriber] = []

    @property
    def total_steps(self) -> int:
        return self._total_steps

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def is_started(self) -> bool:
        """Whether the registration window has closed."""
        return self._current_step != 0

    @property
    def is_complete(self) -> bool:
        return self._current_step == self._total_steps

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a callback invoked after every state change.

        Args:
            subscriber: Zero-argument callable

        Raises:
            StateError: If the process already advanced or subscriber is not callable
        """
        if self.is_started:
            raise StateError("Subscription attempt when process is not in its initial state")
        if subscriber is None or not callable(subscriber):
            raise StateError(f"Subscriber must be callable, got {subscriber!r}")

        self._subscribers.append(subscriber)
        logger.debug(f"Registered subscriber #{len(self._subscribers)}: {subscriber!r}")

    def advance(self, steps: int = 1) -> None:
        """Advance the process by a number of performed steps.

        Advancing by zero steps changes nothing and notifies no one.

        Args:
            steps: Steps performed since the last update

        Raises:
            StateError: If steps is negative or not an integer
        """
        if not _is_int(steps):
            raise StateError(f"Number of steps must be an integer, got {steps!r}")
        if steps < 0:
            raise StateError(f"Invalid number of steps updating the process: equal to {steps}")
        if steps == 0:
            return

        self._current_step += steps

        for subscriber in list(self._subscribers):
            subscriber()

    def __repr__(self) -> str:
        return f"ProcessState(current_step={self._current_step}, total_steps={self._total_steps})"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
