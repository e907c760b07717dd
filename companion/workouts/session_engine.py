"""Session progression engine.

Drives one workout session for one DayPlan:
- every (exercise, set) row is materialized with defaults at construction
- sets are completed sequentially within the active exercise
- completing the last set of an exercise moves focus to the next one
- completing the last set of the last exercise produces the WorkoutLog

Transitions are synchronous. Settle delays between a completion and the
focus change are a presentation concern and belong to the caller.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from loguru import logger
from pydantic import ValidationError

from companion.workouts.errors import (
    ExerciseNotActiveError,
    InvalidSetFieldError,
    InvalidSetIndexError,
    InvalidSetValueError,
    SessionFinishedError,
    SetAlreadyCompletedError,
    SetGatedError,
)
from companion.workouts.models import (
    DayPlan,
    Exercise,
    ExerciseLog,
    ExerciseStatus,
    SetPerformance,
    WorkoutLog,
)
from companion.workouts.variants import ExerciseVariant, variant_for

UPDATABLE_FIELDS = frozenset({"weight", "reps", "cadence", "speed", "distance", "heart_rate"})

CompletionCallback = Callable[[WorkoutLog], None]


@dataclass(frozen=True)
class ExerciseProgress:
    """Read-only view of one exercise in a running session.

    Attributes:
        index: Position of the exercise in the plan
        exercise: The planned exercise
        status: past, active or future relative to the session focus
        sets: Copies of the current set rows
        next_set_index: First set not yet completed, None when all are done
        editable_fields: Fields the user is expected to fill for this exercise
    """

    index: int
    exercise: Exercise
    status: ExerciseStatus
    sets: tuple[SetPerformance, ...]
    next_set_index: int | None
    editable_fields: tuple[str, ...]


@dataclass(frozen=True)
class SessionProgress:
    plan_id: str
    current_exercise_index: int
    finished: bool
    exercises: tuple[ExerciseProgress, ...]

    @property
    def active(self) -> ExerciseProgress | None:
        if self.current_exercise_index < len(self.exercises):
            return self.exercises[self.current_exercise_index]
        return None


class SessionEngine:
    """Stateful controller for one workout session.

    One instance handles exactly one session: once the final set is completed
    the log is emitted and every further mutation is rejected.
    """

    def __init__(
        self,
        plan: DayPlan,
        on_complete: CompletionCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.plan = plan
        self._on_complete = on_complete
        self._clock = clock
        self._now = now
        self._started_at = clock()
        self._last_completed_at: float | None = None
        self._current_exercise_index = 0
        self._log: WorkoutLog | None = None

        self._variants: list[ExerciseVariant] = [variant_for(exercise) for exercise in plan.exercises]
        self._sets: list[list[SetPerformance]] = [
            variant.initial_sets(exercise) for variant, exercise in zip(self._variants, plan.exercises, strict=True)
        ]
        logger.info(f"Session started for plan {plan.id} ({len(plan.exercises)} exercises)")

    @property
    def current_exercise_index(self) -> int:
        return self._current_exercise_index

    @property
    def finished(self) -> bool:
        return self._log is not None

    @property
    def log(self) -> WorkoutLog | None:
        return self._log

    def elapsed_seconds(self) -> float:
        """Time since the session started, frozen once the log is produced."""
        if self._log is not None:
            return self._log.duration_seconds
        return max(0.0, self._clock() - self._started_at)

    def rest_seconds(self) -> float | None:
        """Time since the last completed set, None before the first one."""
        if self._last_completed_at is None or self._log is not None:
            return None
        return max(0.0, self._clock() - self._last_completed_at)

    def exercise_status(self, exercise_index: int) -> ExerciseStatus:
        if exercise_index < self._current_exercise_index:
            return ExerciseStatus.PAST
        if exercise_index == self._current_exercise_index:
            return ExerciseStatus.ACTIVE
        return ExerciseStatus.FUTURE

    def sets_for(self, exercise_index: int) -> tuple[SetPerformance, ...]:
        """Copies of the set rows of one exercise."""
        self._check_exercise_index(exercise_index, 0)
        return tuple(s.model_copy() for s in self._sets[exercise_index])

    def is_set_enabled(self, exercise_index: int, set_index: int) -> bool:
        """Whether a set is open for completion under the gating rule."""
        self._check_exercise_index(exercise_index, set_index)
        sets = self._sets[exercise_index]
        return not sets[set_index].completed and self._variants[exercise_index].can_complete(sets, set_index)

    def progress(self) -> SessionProgress:
        exercises = []
        for index, exercise in enumerate(self.plan.exercises):
            sets = self._sets[index]
            next_set_index = next((i for i, s in enumerate(sets) if not s.completed), None)
            exercises.append(
                ExerciseProgress(
                    index=index,
                    exercise=exercise,
                    status=self.exercise_status(index),
                    sets=tuple(s.model_copy() for s in sets),
                    next_set_index=next_set_index,
                    editable_fields=self._variants[index].editable_fields,
                )
            )
        return SessionProgress(
            plan_id=self.plan.id,
            current_exercise_index=self._current_exercise_index,
            finished=self.finished,
            exercises=tuple(exercises),
        )

    def update_set(self, exercise_index: int, set_index: int, field: str, value: float | None) -> None:
        """Replace one scalar field of one set.

        Not restricted to the active exercise: future exercises may be
        pre-filled. Completion and gating are unaffected.

        Raises:
            SessionFinishedError: If the session already produced its log
            InvalidSetIndexError: If the indices are out of range
            InvalidSetFieldError: If the field is not an editable scalar
            SetAlreadyCompletedError: If the set is already completed
            InvalidSetValueError: If the value does not fit the field type
        """
        self._check_open()
        self._check_exercise_index(exercise_index, set_index)
        if field not in UPDATABLE_FIELDS:
            raise InvalidSetFieldError(field)

        current = self._sets[exercise_index][set_index]
        if current.completed:
            raise SetAlreadyCompletedError(exercise_index, set_index)

        updated = current.model_copy()
        try:
            setattr(updated, field, value)
        except ValidationError as e:
            raise InvalidSetValueError(field, value) from e
        self._sets[exercise_index][set_index] = updated

    def complete_set(self, exercise_index: int, set_index: int) -> WorkoutLog | None:
        """Mark a set completed and advance the session.

        Returns:
            The WorkoutLog if this completion finished the session, else None

        Raises:
            SessionFinishedError: If the session already produced its log
            InvalidSetIndexError: If the indices are out of range
            ExerciseNotActiveError: If the exercise does not have focus
            SetAlreadyCompletedError: If the set is already completed
            SetGatedError: If the preceding set is not completed
        """
        self._check_open()
        self._check_exercise_index(exercise_index, set_index)
        if exercise_index != self._current_exercise_index:
            raise ExerciseNotActiveError(exercise_index, self._current_exercise_index)

        sets = self._sets[exercise_index]
        if sets[set_index].completed:
            raise SetAlreadyCompletedError(exercise_index, set_index)
        if not self._variants[exercise_index].can_complete(sets, set_index):
            raise SetGatedError(exercise_index, set_index)

        sets[set_index] = sets[set_index].model_copy(update={"completed": True})
        self._last_completed_at = self._clock()
        logger.debug(f"Completed set {set_index + 1}/{len(sets)} of exercise {exercise_index} ({self.plan.exercises[exercise_index].name})")

        if not all(s.completed for s in sets):
            return None

        if self._current_exercise_index == len(self.plan.exercises) - 1:
            return self._finish()

        self._current_exercise_index += 1
        logger.debug(f"Advanced to exercise {self._current_exercise_index}")
        return None

    def _finish(self) -> WorkoutLog:
        duration_seconds = max(0.0, self._clock() - self._started_at)
        log = WorkoutLog(
            id=uuid.uuid1().hex,
            date=self._now(),
            day_plan_id=self.plan.id,
            exercises=[
                ExerciseLog(
                    exercise_id=exercise.id,
                    exercise_name=exercise.name,
                    sets=[s.model_copy() for s in sets],
                )
                for exercise, sets in zip(self.plan.exercises, self._sets, strict=True)
            ],
            duration_seconds=duration_seconds,
        )
        self._log = log
        self._current_exercise_index = len(self.plan.exercises)
        logger.info(f"Session finished for plan {self.plan.id} in {duration_seconds:.0f}s")

        if self._on_complete is not None:
            self._on_complete(log)
        return log

    def _check_open(self) -> None:
        if self._log is not None:
            raise SessionFinishedError(self.plan.id)

    def _check_exercise_index(self, exercise_index: int, set_index: int) -> None:
        if not 0 <= exercise_index < len(self._sets):
            raise InvalidSetIndexError(exercise_index, set_index)
        if not 0 <= set_index < len(self._sets[exercise_index]):
            raise InvalidSetIndexError(exercise_index, set_index)
