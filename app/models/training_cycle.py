"""
Training cycle model.

Stores a user's position inside the repeating split.  One row per user.
``current_cycle_day`` is 1-indexed and always within
``1..split_plan.cycle_days``; it is moved only by
:class:`app.services.cycle_service.CycleService`.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class TrainingCycle(SQLModel, table=True):
    """User's cycle state for the active split plan."""

    __tablename__ = "training_cycles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, unique=True, index=True)

    active_split_plan_id: Optional[int] = Field(default=None, foreign_key="split_plans.id")

    # Position inside the cycle (1..cycle_days)
    current_cycle_day: int = Field(default=1, ge=1)
    cycles_completed: int = Field(default=0, ge=0)

    # Start of the in-progress cycle; stats for a completed cycle are
    # aggregated from workouts completed since this instant
    current_cycle_start_date: Optional[datetime.datetime] = Field(default=None)
    last_cycle_completed_at: Optional[datetime.datetime] = Field(default=None)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
