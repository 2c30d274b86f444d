"""
Coach availability model.

Week-by-week availability windows.  A booking slot is bookable only if
one available window of the same location type fully contains it.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class CoachAvailability(SQLModel, table=True):
    __tablename__ = "coach_availability"
    __table_args__ = (
        UniqueConstraint("coach_id", "date", "start_time", "location_type", name="uq_availability_coach_slot"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    date: datetime.date = Field(nullable=False, index=True)
    start_time: datetime.time = Field(nullable=False)
    end_time: datetime.time = Field(nullable=False)
    is_available: bool = Field(default=True)
    location_type: str = Field(default="in_person", max_length=20)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
