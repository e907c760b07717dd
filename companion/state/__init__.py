"""Application state and pure transitions."""
