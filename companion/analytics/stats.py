"""Workout history statistics.

Volume is the sum of weight × reps over completed sets. Bike entries carry
zero weight, so they do not contribute to volume.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, tzinfo

from pydantic import BaseModel, Field

from companion.workouts.models import WorkoutLog

DEFAULT_WINDOW = 7

# Short French weekday labels, Monday first
WEEKDAY_LABELS = ("lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim.")


class VolumePoint(BaseModel):
    date: datetime
    label: str
    volume: float
    duration_minutes: int


class StatsSummary(BaseModel):
    total_sessions: int
    last_session_date: datetime | None = None
    points: list[VolumePoint] = Field(default_factory=list)


def log_volume(log: WorkoutLog) -> float:
    """Total load moved in one session (kg)."""
    return sum(s.weight * s.reps for exercise in log.exercises for s in exercise.sets if s.completed)


def summarize_logs(
    logs: Sequence[WorkoutLog],
    window: int = DEFAULT_WINDOW,
    tz: tzinfo | None = None,
) -> StatsSummary:
    """Summarize the history for the stats view.

    Args:
        logs: Workout history, oldest first
        window: Number of most recent sessions to chart
        tz: Timezone for weekday labels (default: local time)

    Returns:
        Session count, last session date and one point per recent session
    """
    if not logs:
        return StatsSummary(total_sessions=0)

    recent = list(logs)[-window:] if window > 0 else []
    points = [
        VolumePoint(
            date=log.date,
            label=WEEKDAY_LABELS[log.date.astimezone(tz).weekday()],
            volume=log_volume(log),
            duration_minutes=round(log.duration_seconds / 60),
        )
        for log in recent
    ]
    return StatsSummary(total_sessions=len(logs), last_session_date=logs[-1].date, points=points)
