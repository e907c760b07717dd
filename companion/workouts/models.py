"""Workout domain models.

Plans and exercises are produced once by the plan parser and never mutated.
Set performances are the only mutable objects: they are materialized when a
session starts and edited/completed by the session engine.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExerciseCategory(StrEnum):
    WARMUP = "warmup"
    STRENGTH = "strength"
    ABS = "abs"


class ExerciseMode(StrEnum):
    STANDARD = "standard"
    BIKE = "bike"


class ExerciseStatus(StrEnum):
    """Position of an exercise relative to the session focus."""

    PAST = "past"
    ACTIVE = "active"
    FUTURE = "future"


ABS_REPS = "Max"


class Exercise(BaseModel):
    """One trackable unit within a plan.

    Attributes:
        id: Identifier, unique within its plan
        name: Display name
        category: warmup, strength or abs
        mode: standard (per-set weight/reps) or bike (single aggregate entry)
        sets: Number of independently-trackable performance rows
        reps: Plain integer, "Max", or a duration token such as "10min"
        target_cadence: Target RPM as a string of digits
        target_duration: Target duration in minutes as a string of digits
        weight_recommendation: Optional free-text load hint
        description: Free text shown to the user
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: ExerciseCategory
    mode: ExerciseMode
    sets: int = Field(gt=0)
    reps: str
    target_cadence: str | None = None
    target_duration: str | None = None
    weight_recommendation: str | None = None
    description: str | None = None

    @model_validator(mode="after")
    def check_variant_invariants(self) -> Exercise:
        """Bike exercises are a single aggregate entry; abs are a single max-effort set."""
        if self.mode == ExerciseMode.BIKE and self.sets != 1:
            raise ValueError(f"Bike exercise {self.id} must have exactly 1 set, got {self.sets}")
        if self.category == ExerciseCategory.ABS:
            if self.mode != ExerciseMode.STANDARD:
                raise ValueError(f"Abs exercise {self.id} must be in standard mode")
            if self.sets != 1 or self.reps != ABS_REPS:
                raise ValueError(f"Abs exercise {self.id} must have 1 set of {ABS_REPS!r} reps")
        return self


class DayPlan(BaseModel):
    """One parsed program, executed in a single session.

    Exercise order is warmup, strength exercises in source order, then abs.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    duration: str
    exercises: tuple[Exercise, ...] = ()


class SetPerformance(BaseModel):
    """One performance row for an exercise.

    `reps` also carries the duration in minutes for bike and time-based entries.
    Assignment is type-checked; no other validation is applied.
    """

    model_config = ConfigDict(validate_assignment=True)

    set_number: int = Field(ge=1)
    weight: float = 0
    reps: float = 0
    cadence: float | None = None
    speed: float | None = None
    distance: float | None = None
    heart_rate: float | None = None
    completed: bool = False


class ExerciseLog(BaseModel):
    exercise_id: str
    exercise_name: str
    sets: list[SetPerformance] = Field(default_factory=list)


class WorkoutLog(BaseModel):
    """Finished performance log, emitted once per session."""

    id: str
    date: datetime
    day_plan_id: str
    exercises: list[ExerciseLog] = Field(default_factory=list)
    duration_seconds: float = Field(ge=0)
    notes: str | None = None
