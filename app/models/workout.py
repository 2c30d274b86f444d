"""
Workout database model.

A workout instance of a split plan session.  Completed workouts feed the
cycle completion statistics; non-completed ones are re-synced when the
split plan is modified.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class WorkoutStatus:
    DRAFT = "draft"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Workout(SQLModel, table=True):
    __tablename__ = "workouts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    split_plan_id: Optional[int] = Field(default=None, foreign_key="split_plans.id", index=True)

    cycle_day: Optional[int] = Field(default=None, ge=1)
    variation: Optional[str] = Field(default=None, max_length=10)
    workout_type: Optional[str] = Field(default=None, max_length=50)
    status: str = Field(default=WorkoutStatus.DRAFT, max_length=20, index=True)

    # Exercise list: [{"name", "primary_muscle", "secondary_muscles", "sets"}]
    exercises: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    total_volume: float = Field(default=0.0)
    total_sets: int = Field(default=0)
    duration_seconds: int = Field(default=0)
    mental_readiness_overall: Optional[int] = Field(default=None, ge=1, le=5)

    planned_at: Optional[datetime.date] = Field(default=None)
    completed_at: Optional[datetime.datetime] = Field(default=None, index=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
