from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class StoredState(Base):
    """Key/value storage for serialized application collections.

    Stores:
    - key: Fixed collection name (plans or logs)
    - payload: Full JSON-serialized collection, rewritten on every change
    - updated_at: Timestamp of the last rewrite
    """

    __tablename__ = "companion_state"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    payload: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
