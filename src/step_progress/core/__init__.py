"""Progress state and runtime measurement."""
