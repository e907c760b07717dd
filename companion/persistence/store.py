"""Persistence of the plan list and workout history.

Both collections are stored whole, as JSON, under two fixed keys. They are
loaded once at startup and rewritten entirely whenever they change.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager
from typing import Any

from loguru import logger
from pydantic import TypeAdapter
from sqlalchemy import delete
from sqlalchemy.orm import Session

from companion.db.models import StoredState
from companion.db.session import get_session
from companion.state.app_state import AppState
from companion.workouts.models import DayPlan, WorkoutLog

PLANS_KEY = "companion_plans"
LOGS_KEY = "companion_logs"

_plans_adapter = TypeAdapter(list[DayPlan])
_logs_adapter = TypeAdapter(list[WorkoutLog])

SessionFactory = Callable[[], AbstractContextManager[Session]]


class StateStore:
    """Reads and writes the two persisted collections.

    Args:
        session_factory: Context manager factory yielding a SQLAlchemy session
    """

    def __init__(self, session_factory: SessionFactory = get_session):
        self._session_factory = session_factory

    def load(self) -> AppState:
        """Load plans and logs into a fresh AppState.

        Missing or unreadable collections load as empty.
        """
        plans = self._load(PLANS_KEY, _plans_adapter)
        logs = self._load(LOGS_KEY, _logs_adapter)
        logger.info(f"Loaded {len(plans)} plans and {len(logs)} workout logs")
        return AppState(plans=tuple(plans), logs=tuple(logs))

    def save_plans(self, plans: Iterable[DayPlan]) -> None:
        self._save(PLANS_KEY, _plans_adapter.dump_python(list(plans), mode="json"))

    def save_logs(self, logs: Iterable[WorkoutLog]) -> None:
        self._save(LOGS_KEY, _logs_adapter.dump_python(list(logs), mode="json"))

    def save(self, state: AppState, previous: AppState | None = None) -> None:
        """Persist the collections of `state` that differ from `previous`."""
        if previous is None or state.plans != previous.plans:
            self.save_plans(state.plans)
        if previous is None or state.logs != previous.logs:
            self.save_logs(state.logs)

    def _load(self, key: str, adapter: TypeAdapter[Any]) -> list[Any]:
        # Undecodable JSON surfaces as ValueError from the row read, invalid shapes from validation
        try:
            with self._session_factory() as session:
                row = session.get(StoredState, key)
                if row is None:
                    return []
                payload = row.payload
            return adapter.validate_python(payload)
        except ValueError as e:
            logger.error(f"Stored collection {key} is unreadable, starting empty: {e}")
            return []

    def _save(self, key: str, payload: list[Any]) -> None:
        # Replace without reading the old payload, which may not decode
        with self._session_factory() as session:
            session.execute(delete(StoredState).where(StoredState.key == key))
            session.add(StoredState(key=key, payload=payload))
        logger.debug(f"Saved {len(payload)} items under {key}")
