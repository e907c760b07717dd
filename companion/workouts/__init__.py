"""Workout domain: exercise/plan types and the session progression engine."""
