"""Workout companion: import tabular workout programs and log sessions."""
