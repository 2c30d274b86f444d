"""
Split modification log.

Append-only record of every split-plan edit.  ``previous_state`` holds
the plan's sessions / frequency map / volume distribution and the
``{id, cycle_day, status}`` of every workout the edit touched, so the
most recent entry can be replayed by undo and then deleted.

A ``change_split_type`` entry is written when another plan replaces the
active one; its ``previous_state`` holds the replaced plan id and the
cycle position ``{active_split_plan_id, current_cycle_day,
current_cycle_start_date}`` instead of plan contents.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ModificationType:
    SWAP_DAYS = "swap_days"
    TOGGLE_MUSCLE = "toggle_muscle"
    CHANGE_VARIATION = "change_variation"
    CHANGE_SPLIT_TYPE = "change_split_type"


class SplitModification(SQLModel, table=True):
    __tablename__ = "split_modifications"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    split_plan_id: int = Field(foreign_key="split_plans.id", nullable=False, index=True)

    modification_type: str = Field(nullable=False, max_length=30)
    details: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    previous_state: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    # Opaque validation payload from the split-change validator
    ai_validation: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    user_override: bool = Field(default=False)
    user_reason: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow, index=True)
