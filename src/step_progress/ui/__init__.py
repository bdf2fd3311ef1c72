"""Terminal rendering of tracked progress."""
