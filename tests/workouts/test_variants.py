"""Tests for exercise variants.

Tests enforce that:
- Every (category, mode) pair produced by the parser has a variant
- Default set values follow the documented fallbacks
- Editable fields depend on the variant
"""

import pytest

from companion.workouts.models import Exercise, ExerciseCategory, ExerciseMode
from companion.workouts.variants import (
    DEFAULT_REPS,
    DEFAULT_WEIGHT_KG,
    AbsVariant,
    BikeStrengthVariant,
    BikeWarmupVariant,
    ExerciseVariant,
    StandardStrengthVariant,
    StandardWarmupVariant,
    variant_for,
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


@pytest.mark.parametrize(
    ("category", "mode", "expected"),
    [
        (ExerciseCategory.WARMUP, ExerciseMode.STANDARD, StandardWarmupVariant),
        (ExerciseCategory.STRENGTH, ExerciseMode.STANDARD, StandardStrengthVariant),
        (ExerciseCategory.WARMUP, ExerciseMode.BIKE, BikeWarmupVariant),
        (ExerciseCategory.STRENGTH, ExerciseMode.BIKE, BikeStrengthVariant),
    ],
)
def test_variant_dispatch(category, mode, expected):
    sets = 1 if mode == ExerciseMode.BIKE else 3
    exercise = _exercise(category=category, mode=mode, sets=sets)

    assert isinstance(variant_for(exercise), expected)


def test_abs_variant():
    exercise = _exercise(category=ExerciseCategory.ABS, sets=1, reps="Max")

    variant = variant_for(exercise)

    assert isinstance(variant, AbsVariant)
    assert variant.editable_fields == ()


def test_all_sample_exercises_have_a_variant(sample_plans):
    for plan in sample_plans:
        for exercise in plan.exercises:
            assert variant_for(exercise) is not None


def test_standard_defaults_without_hints():
    default = variant_for(_exercise(reps="12")).default_set(_exercise(reps="12"), 1)

    assert default.weight == DEFAULT_WEIGHT_KG
    assert default.reps == 12
    assert default.completed is False


def test_standard_weight_from_description():
    exercise = _exercise(description="4 séries de 6 à 40kg")

    default = variant_for(exercise).default_set(exercise, 2)

    assert default.weight == 40
    assert default.set_number == 2


@pytest.mark.parametrize("reps", ["Max", "8-12", "1min", "0"])
def test_standard_reps_fallback(reps):
    exercise = _exercise(reps=reps)

    default = variant_for(exercise).default_set(exercise, 1)

    # "0" is a plain integer and is kept as is
    assert default.reps == (0 if reps == "0" else DEFAULT_REPS)


def test_initial_sets_numbered_from_one():
    exercise = _exercise(sets=4)

    sets = variant_for(exercise).initial_sets(exercise)

    assert [s.set_number for s in sets] == [1, 2, 3, 4]


def test_bike_defaults_prefer_target_duration():
    exercise = _exercise(mode=ExerciseMode.BIKE, sets=1, reps="10min", target_duration="15", target_cadence="95")

    default = variant_for(exercise).default_set(exercise, 1)

    assert default.weight == 0
    assert default.reps == 15
    assert default.cadence == 95


def test_bike_defaults_from_reps_text(sample_plans):
    force = sample_plans[1].exercises[1]

    default = variant_for(force).default_set(force, 1)

    assert default.reps == 5
    assert default.cadence == 60


def test_bike_defaults_without_hints():
    exercise = _exercise(mode=ExerciseMode.BIKE, sets=1, reps="10")

    default = variant_for(exercise).default_set(exercise, 1)

    assert default.reps == 0
    assert default.cadence is None


def test_editable_fields():
    assert StandardStrengthVariant.editable_fields == ("weight", "reps")
    assert StandardWarmupVariant.editable_fields == ()
    assert BikeWarmupVariant.editable_fields == ("reps", "cadence")
    assert BikeStrengthVariant.editable_fields == ("speed", "distance", "heart_rate", "cadence")


def test_gating_rule():
    exercise = _exercise(sets=3)
    variant = variant_for(exercise)
    sets = variant.initial_sets(exercise)

    assert variant.can_complete(sets, 0)
    assert not variant.can_complete(sets, 1)

    sets[0].completed = True

    assert variant.can_complete(sets, 1)
    assert not variant.can_complete(sets, 2)


def test_base_variant_is_abstract():
    with pytest.raises(TypeError):
        ExerciseVariant()
