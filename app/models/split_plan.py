"""
Split plan database model.

A split plan is a fixed-length training cycle.  ``sessions`` is a list of
session definitions (one per cycle day)::

    {"day": 1, "name": "Push A", "workout_type": "push", "variation": "A",
     "focus": ["chest", "shoulders"], "target_volume": {"chest": 8}}

``frequency_map`` maps a muscle group to how many sessions hit it per
cycle and ``volume_distribution`` maps it to total sets per cycle.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class SplitPlan(SQLModel, table=True):
    __tablename__ = "split_plans"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    split_type: str = Field(default="custom", max_length=50)
    cycle_days: int = Field(nullable=False, ge=1, le=14)

    sessions: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    frequency_map: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    volume_distribution: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    active: bool = Field(default=False, index=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
