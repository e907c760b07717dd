"""Application state (single source of truth for the interactive surfaces).

State is immutable: every external event goes through a pure transition
function returning a new AppState. Nothing here performs I/O; persisting the
plan list and log history is the store's job.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import StrEnum

from companion.workouts.models import DayPlan, WorkoutLog


class ViewState(StrEnum):
    HOME = "home"
    WORKOUT = "workout"
    STATS = "stats"
    SETTINGS = "settings"


class PlanNotFoundError(Exception):
    """Raised when starting a workout for a plan that is not loaded."""

    def __init__(self, plan_id: str):
        self.message = f"Plan {plan_id} not found"
        super().__init__(self.message)


@dataclass(frozen=True)
class AppState:
    """Immutable application state.

    Attributes:
        view: Screen currently shown
        plans: Imported day plans
        logs: Append-only workout history
        active_plan_id: Plan of the running workout, if any
    """

    view: ViewState = ViewState.HOME
    plans: tuple[DayPlan, ...] = ()
    logs: tuple[WorkoutLog, ...] = ()
    active_plan_id: str | None = None

    @property
    def active_plan(self) -> DayPlan | None:
        if self.active_plan_id is None:
            return None
        return find_plan(self, self.active_plan_id)


def find_plan(state: AppState, plan_id: str) -> DayPlan | None:
    return next((plan for plan in state.plans if plan.id == plan_id), None)


def navigate(state: AppState, view: ViewState) -> AppState:
    return replace(state, view=view)


def import_plans(state: AppState, plans: Iterable[DayPlan]) -> AppState:
    """Replace the plan list with freshly imported plans."""
    new_plans = tuple(plans)
    active_plan_id = state.active_plan_id
    if active_plan_id is not None and all(plan.id != active_plan_id for plan in new_plans):
        active_plan_id = None
    return replace(state, plans=new_plans, active_plan_id=active_plan_id)


def clear_plans(state: AppState) -> AppState:
    """Drop imported plans and any running workout; history is kept."""
    return replace(state, plans=(), active_plan_id=None)


def start_workout(state: AppState, plan_id: str) -> AppState:
    """Select a plan and switch to the workout view.

    Raises:
        PlanNotFoundError: If no loaded plan has this id
    """
    if find_plan(state, plan_id) is None:
        raise PlanNotFoundError(plan_id)
    return replace(state, active_plan_id=plan_id, view=ViewState.WORKOUT)


def finish_workout(state: AppState, log: WorkoutLog) -> AppState:
    """Append a finished log and show stats."""
    return replace(state, logs=(*state.logs, log), active_plan_id=None, view=ViewState.STATS)


def cancel_workout(state: AppState) -> AppState:
    """Abandon the running workout without producing a log."""
    return replace(state, active_plan_id=None, view=ViewState.HOME)
