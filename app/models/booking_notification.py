"""
Booking notification queue.

Rows are written with ``status='pending'`` and delivered by an external
dispatcher (in-app / email).
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class NotificationType:
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_RESCHEDULED = "booking_rescheduled"
    REMINDER_24H = "reminder_24h"


class BookingNotification(SQLModel, table=True):
    __tablename__ = "booking_notifications"

    id: Optional[int] = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="bookings.id", nullable=False, index=True)
    recipient_id: int = Field(foreign_key="users.id", nullable=False, index=True)

    notification_type: str = Field(nullable=False, max_length=30)
    channel: str = Field(default="in_app", max_length=10)  # in_app | email
    scheduled_for: datetime.datetime = Field(nullable=False)
    sent_at: Optional[datetime.datetime] = Field(default=None)
    status: str = Field(default="pending", max_length=10)  # pending | sent | failed

    payload: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
