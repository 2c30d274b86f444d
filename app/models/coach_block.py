"""
Coach block model.

A coach-declared unavailability window over ``start_date..end_date``
(inclusive).  Without times the block covers whole days; with times it
covers that range on every day of the window.  Blocks are a hard
exclusion for every booking path.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class CoachBlock(SQLModel, table=True):
    __tablename__ = "coach_blocks"

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    # competition | travel | study | personal | custom
    block_type: str = Field(default="personal", max_length=20)
    custom_reason: Optional[str] = Field(default=None, max_length=255)

    start_date: datetime.date = Field(nullable=False, index=True)
    end_date: datetime.date = Field(nullable=False, index=True)
    start_time: Optional[datetime.time] = Field(default=None)
    end_time: Optional[datetime.time] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)

    @property
    def is_full_day(self) -> bool:
        return self.start_time is None and self.end_time is None
