"""
Booking waitlist model.

Clients waiting for a slot with a coach.  ``priority_score`` (0-100) is
computed elsewhere and treated as opaque here.  ``preferred_days`` uses
0=Sunday .. 6=Saturday; an empty list means any day.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class WaitlistStatus:
    ACTIVE = "active"
    NOTIFIED = "notified"
    BOOKED = "booked"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class WaitlistEntry(SQLModel, table=True):
    __tablename__ = "booking_waitlist_entries"

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    client_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    # Client preferences
    preferred_days: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    preferred_time_start: Optional[datetime.time] = Field(default=None)
    preferred_time_end: Optional[datetime.time] = Field(default=None)
    urgency_level: int = Field(default=50, ge=0, le=100)
    notes: Optional[str] = Field(default=None, max_length=1000)

    priority_score: int = Field(default=50, ge=0, le=100)

    # Offer lifecycle
    status: str = Field(default=WaitlistStatus.ACTIVE, max_length=20, index=True)
    offered_slot: Optional[dict] = Field(default=None, sa_column=Column(JSON, nullable=True))
    notified_at: Optional[datetime.datetime] = Field(default=None)
    response_deadline: Optional[datetime.datetime] = Field(default=None)
    responded_at: Optional[datetime.datetime] = Field(default=None)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
