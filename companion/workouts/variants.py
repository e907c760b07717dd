"""Exercise variants keyed by (category, mode).

Each variant owns how the default SetPerformance rows of an exercise are
computed, which fields the user is expected to edit, and when a set may be
completed. The session engine only talks to variants through `variant_for`.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence

from companion.workouts.models import Exercise, ExerciseCategory, ExerciseMode, SetPerformance

DEFAULT_WEIGHT_KG = 8.0
DEFAULT_REPS = 10.0

WEIGHT_PATTERN = re.compile(r"(\d+)kg", re.IGNORECASE)
INTEGER_PATTERN = re.compile(r"\d+")
DURATION_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*min", re.IGNORECASE)


class ExerciseVariant(ABC):
    """Base variant: sequential gating, no editable fields."""

    category: ExerciseCategory
    mode: ExerciseMode
    editable_fields: tuple[str, ...] = ()

    @abstractmethod
    def default_set(self, exercise: Exercise, set_number: int) -> SetPerformance:
        """Default performance row for one set, before any user edit."""

    def initial_sets(self, exercise: Exercise) -> list[SetPerformance]:
        return [self.default_set(exercise, i + 1) for i in range(exercise.sets)]

    def can_complete(self, sets: Sequence[SetPerformance], set_index: int) -> bool:
        """Set k is eligible once set k-1 is completed; set 0 always is."""
        return set_index == 0 or sets[set_index - 1].completed


class StandardVariant(ExerciseVariant):
    """Weight/reps rows with defaults read from the exercise text."""

    mode = ExerciseMode.STANDARD

    def default_set(self, exercise: Exercise, set_number: int) -> SetPerformance:
        weight = DEFAULT_WEIGHT_KG
        weight_match = WEIGHT_PATTERN.search(exercise.description or "")
        if weight_match:
            weight = float(weight_match.group(1))

        # "Max", "8-12" and duration tokens are not plain integers
        reps = DEFAULT_REPS
        if INTEGER_PATTERN.fullmatch(exercise.reps.strip()):
            reps = float(exercise.reps)

        return SetPerformance(set_number=set_number, weight=weight, reps=reps)


class StandardWarmupVariant(StandardVariant):
    category = ExerciseCategory.WARMUP


class StandardStrengthVariant(StandardVariant):
    category = ExerciseCategory.STRENGTH
    editable_fields = ("weight", "reps")


class AbsVariant(StandardVariant):
    category = ExerciseCategory.ABS


class BikeVariant(ExerciseVariant):
    """Single aggregate entry; `reps` carries the duration in minutes."""

    mode = ExerciseMode.BIKE

    def default_set(self, exercise: Exercise, set_number: int) -> SetPerformance:
        duration = 0.0
        if exercise.target_duration:
            duration = float(exercise.target_duration)
        else:
            duration_match = DURATION_PATTERN.search(exercise.reps)
            if duration_match:
                duration = float(duration_match.group(1))

        cadence = float(exercise.target_cadence) if exercise.target_cadence else None

        return SetPerformance(set_number=set_number, weight=0, reps=duration, cadence=cadence)


class BikeWarmupVariant(BikeVariant):
    category = ExerciseCategory.WARMUP
    editable_fields = ("reps", "cadence")


class BikeStrengthVariant(BikeVariant):
    category = ExerciseCategory.STRENGTH
    editable_fields = ("speed", "distance", "heart_rate", "cadence")


_VARIANTS: dict[tuple[ExerciseCategory, ExerciseMode], ExerciseVariant] = {
    (variant.category, variant.mode): variant
    for variant in (
        StandardWarmupVariant(),
        StandardStrengthVariant(),
        AbsVariant(),
        BikeWarmupVariant(),
        BikeStrengthVariant(),
    )
}


def variant_for(exercise: Exercise) -> ExerciseVariant:
    """Get the variant handling an exercise.

    Raises:
        KeyError: If no variant exists for the exercise's (category, mode)
    """
    try:
        return _VARIANTS[(exercise.category, exercise.mode)]
    except KeyError:
        raise KeyError(f"No variant for category={exercise.category} mode={exercise.mode}") from None
