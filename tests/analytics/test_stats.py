"""Tests for workout history statistics.

Tests enforce that:
- Volume counts completed sets only
- The chart window keeps the most recent sessions, oldest first
- An empty history yields an empty summary
"""

from datetime import UTC, timedelta, timezone

from companion.analytics.stats import WEEKDAY_LABELS, log_volume, summarize_logs
from companion.workouts.models import ExerciseLog, SetPerformance, WorkoutLog


def _log(date, sets, duration_seconds=3600.0, log_id="log"):
    return WorkoutLog(
        id=log_id,
        date=date,
        day_plan_id="p",
        exercises=[ExerciseLog(exercise_id="e", exercise_name="Squat", sets=sets)],
        duration_seconds=duration_seconds,
    )


def test_log_volume_counts_completed_sets(fixed_now):
    log = _log(
        fixed_now,
        [
            SetPerformance(set_number=1, weight=20, reps=10, completed=True),
            SetPerformance(set_number=2, weight=20, reps=8, completed=True),
            SetPerformance(set_number=3, weight=20, reps=8, completed=False),
        ],
    )

    assert log_volume(log) == 360


def test_bike_sets_have_no_volume(fixed_now):
    log = _log(fixed_now, [SetPerformance(set_number=1, weight=0, reps=30, cadence=90, completed=True)])

    assert log_volume(log) == 0


def test_empty_history():
    summary = summarize_logs([])

    assert summary.total_sessions == 0
    assert summary.last_session_date is None
    assert summary.points == []


def test_summary_window(fixed_now):
    logs = [
        _log(fixed_now + timedelta(days=i), [SetPerformance(set_number=1, weight=10, reps=i, completed=True)], log_id=f"log-{i}")
        for i in range(10)
    ]

    summary = summarize_logs(logs, window=7)

    assert summary.total_sessions == 10
    assert summary.last_session_date == logs[-1].date
    assert len(summary.points) == 7
    assert [point.volume for point in summary.points] == [30, 40, 50, 60, 70, 80, 90]


def test_point_labels_and_duration(fixed_now):
    summary = summarize_logs([_log(fixed_now, [], duration_seconds=2710)], tz=UTC)

    point = summary.points[0]
    assert point.label == WEEKDAY_LABELS[0] == "lun."
    assert point.duration_minutes == 45
    assert point.volume == 0


def test_weekday_label_uses_local_date(fixed_now):
    late_monday_utc = fixed_now.replace(hour=23, minute=30)
    paris_summer = timezone(timedelta(hours=2))

    summary = summarize_logs([_log(late_monday_utc, [])], tz=paris_summer)

    assert summary.points[0].label == "mar."
    assert summary.points[0].date == late_monday_utc
