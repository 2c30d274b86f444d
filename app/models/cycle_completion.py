"""
Cycle completion model.

Immutable snapshot written once per cycle wraparound, in the same
transaction that resets the user's cycle day.  ``(user_id,
cycle_number)`` is unique so a concurrent double wraparound cannot
record the same cycle twice.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


class CycleCompletion(SQLModel, table=True):
    __tablename__ = "cycle_completions"
    __table_args__ = (UniqueConstraint("user_id", "cycle_number", name="uq_cycle_completion_user_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    split_plan_id: int = Field(foreign_key="split_plans.id", nullable=False)
    cycle_number: int = Field(nullable=False, ge=1)
    completed_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)

    # Aggregates over the completed workouts of the cycle
    total_volume: float = Field(default=0.0)
    total_workouts_completed: int = Field(default=0)
    total_sets: int = Field(default=0)
    total_duration_seconds: int = Field(default=0)
    avg_mental_readiness: Optional[float] = Field(default=None)
    sets_by_muscle_group: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    workouts_by_type: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
