"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from companion.db.models import Base
from companion.upload.plan_parser import SAMPLE_CSV, parse_plan_csv
from companion.workouts.models import DayPlan, Exercise, ExerciseCategory, ExerciseMode


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 4, 18, 30, tzinfo=UTC)


@pytest.fixture
def sample_plans() -> list[DayPlan]:
    """The three plans of the built-in sample program."""
    return parse_plan_csv(SAMPLE_CSV)


@pytest.fixture
def strength_plan() -> DayPlan:
    """Small standard plan: warmup, one 3-set exercise, abs."""
    return DayPlan(
        id="test-1",
        name="Test",
        duration="45min",
        exercises=(
            Exercise(
                id="test-1-warmup",
                name="Échauffement",
                category=ExerciseCategory.WARMUP,
                mode=ExerciseMode.STANDARD,
                sets=1,
                reps="0",
                description="Rameur 5min",
            ),
            Exercise(
                id="test-1-ex-1",
                name="Squat",
                category=ExerciseCategory.STRENGTH,
                mode=ExerciseMode.STANDARD,
                sets=3,
                reps="8",
                description="3 séries de 8 répétitions à 12kg",
            ),
            Exercise(
                id="test-1-abs",
                name="Abdominaux",
                category=ExerciseCategory.ABS,
                mode=ExerciseMode.STANDARD,
                sets=1,
                reps="Max",
                description="Gainage",
            ),
        ),
    )


@pytest.fixture
def db_session_factory():
    """Provides an isolated in-memory SQLite session factory per test.

    The returned callable behaves like `companion.db.session.get_session`:
    it yields a session, commits on success and rolls back on error.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @contextmanager
    def get_test_session() -> Generator[Session, None, None]:
        session = session_local()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    yield get_test_session
    engine.dispose()
