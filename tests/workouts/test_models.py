"""Tests for workout domain models.

Tests enforce that:
- Plans and exercises are immutable
- Bike and abs invariants are validated at construction
- Set performances are type-checked on assignment
"""

import pytest
from pydantic import ValidationError

from companion.workouts.models import (
    ABS_REPS,
    Exercise,
    ExerciseCategory,
    ExerciseMode,
    SetPerformance,
    WorkoutLog,
)


def _exercise(**overrides):
    values = {
        "id": "x",
        "name": "Exercice",
        "category": ExerciseCategory.STRENGTH,
        "mode": ExerciseMode.STANDARD,
        "sets": 3,
        "reps": "10",
    }
    values.update(overrides)
    return Exercise(**values)


def test_exercise_is_frozen():
    exercise = _exercise()

    with pytest.raises(ValidationError):
        exercise.sets = 5


def test_plan_is_frozen(strength_plan):
    with pytest.raises(ValidationError):
        strength_plan.name = "Autre"


@pytest.mark.parametrize("sets", [0, -1])
def test_sets_must_be_positive(sets):
    with pytest.raises(ValidationError):
        _exercise(sets=sets)


def test_bike_exercise_has_one_set():
    with pytest.raises(ValidationError, match="exactly 1 set"):
        _exercise(mode=ExerciseMode.BIKE, sets=4)


def test_abs_must_be_standard():
    with pytest.raises(ValidationError, match="standard mode"):
        _exercise(category=ExerciseCategory.ABS, mode=ExerciseMode.BIKE, sets=1, reps=ABS_REPS)


def test_abs_must_be_single_max_set():
    with pytest.raises(ValidationError):
        _exercise(category=ExerciseCategory.ABS, sets=3, reps=ABS_REPS)
    with pytest.raises(ValidationError):
        _exercise(category=ExerciseCategory.ABS, sets=1, reps="20")


def test_set_performance_defaults():
    performance = SetPerformance(set_number=1)

    assert performance.weight == 0
    assert performance.reps == 0
    assert performance.cadence is None
    assert performance.completed is False


def test_set_performance_validates_assignment():
    performance = SetPerformance(set_number=1)

    with pytest.raises(ValidationError):
        performance.weight = "lourd"


def test_workout_log_json_round_trip(fixed_now):
    log = WorkoutLog(id="log-1", date=fixed_now, day_plan_id="p", duration_seconds=60)

    restored = WorkoutLog.model_validate_json(log.model_dump_json())

    assert restored == log


def test_workout_log_rejects_negative_duration(fixed_now):
    with pytest.raises(ValidationError):
        WorkoutLog(id="log-1", date=fixed_now, day_plan_id="p", duration_seconds=-1)
