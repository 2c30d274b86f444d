"""
Booking database model.

A single coaching session.  Bookings generated from a recurrence
pattern share ``recurring_series_id`` and carry a 0-based
``occurrence_index`` assigned once, in chronological order, when the
series is created.

Status transitions: ``confirmed -> cancelled | completed | no_show``;
the three target states are terminal.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class BookingStatus:
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"

    TERMINAL = frozenset({CANCELLED, COMPLETED, NO_SHOW})


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    client_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    # Time slot
    scheduled_date: datetime.date = Field(nullable=False, index=True)
    start_time: datetime.time = Field(nullable=False)
    end_time: datetime.time = Field(nullable=False)
    duration_minutes: int = Field(default=60)
    location_type: str = Field(default="in_person", max_length=20)

    status: str = Field(default=BookingStatus.CONFIRMED, max_length=20, index=True)

    # Recurring series
    recurring_series_id: Optional[str] = Field(default=None, max_length=36, index=True)
    recurring_pattern: Optional[dict] = Field(default=None, sa_column=Column(JSON, nullable=True))
    occurrence_index: Optional[int] = Field(default=None)

    # Notes
    coach_notes: Optional[str] = Field(default=None, max_length=1000)
    client_notes: Optional[str] = Field(default=None, max_length=1000)
    cancellation_reason: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    cancelled_at: Optional[datetime.datetime] = Field(default=None)
    completed_at: Optional[datetime.datetime] = Field(default=None)
