"""
Booking repository.

Handles database operations for :class:`Booking`, including the
per-coach lookups used by slot conflict checks and series queries.
"""

import datetime
from typing import Iterable, Optional

from sqlmodel import Session, select

from app.models.booking import Booking, BookingStatus


class BookingRepository:
    """Repository for Booking database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, booking_id: int) -> Optional[Booking]:
        return self.session.get(Booking, booking_id)

    def get_confirmed_for_coach(self, coach_id: int, dates: Iterable[datetime.date]) -> list[Booking]:
        statement = select(Booking).where(
            Booking.coach_id == coach_id,
            Booking.scheduled_date.in_(list(dates)),
            Booking.status == BookingStatus.CONFIRMED,
        )
        return list(self.session.exec(statement).all())

    def get_by_coach_range(self, coach_id: int, start: datetime.date, end: datetime.date) -> list[Booking]:
        statement = (select(Booking)
                     .where(Booking.coach_id == coach_id, Booking.scheduled_date >= start,
                            Booking.scheduled_date <= end)
                     .order_by(Booking.scheduled_date, Booking.start_time))
        return list(self.session.exec(statement).all())

    def get_by_client(self, client_id: int, start: Optional[datetime.date] = None,
                      end: Optional[datetime.date] = None) -> list[Booking]:
        statement = select(Booking).where(Booking.client_id == client_id)
        if start is not None:
            statement = statement.where(Booking.scheduled_date >= start)
        if end is not None:
            statement = statement.where(Booking.scheduled_date <= end)
        statement = statement.order_by(Booking.scheduled_date, Booking.start_time)
        return list(self.session.exec(statement).all())

    def get_upcoming_for_client(self, client_id: int, today: datetime.date, limit: int = 10) -> list[Booking]:
        statement = (select(Booking)
                     .where(Booking.client_id == client_id, Booking.status == BookingStatus.CONFIRMED,
                            Booking.scheduled_date >= today)
                     .order_by(Booking.scheduled_date, Booking.start_time)
                     .limit(limit))
        return list(self.session.exec(statement).all())

    def get_series(self, series_id: str) -> list[Booking]:
        statement = (select(Booking)
                     .where(Booking.recurring_series_id == series_id)
                     .order_by(Booking.occurrence_index, Booking.scheduled_date, Booking.start_time))
        return list(self.session.exec(statement).all())

    def get_confirmed_in_series(self, series_id: str, from_index: Optional[int] = None) -> list[Booking]:
        """Confirmed occurrences of a series, optionally from *from_index* on."""
        statement = select(Booking).where(
            Booking.recurring_series_id == series_id,
            Booking.status == BookingStatus.CONFIRMED,
        )
        if from_index is not None:
            statement = statement.where(Booking.occurrence_index >= from_index)
        statement = statement.order_by(Booking.occurrence_index)
        return list(self.session.exec(statement).all())

    def add(self, booking: Booking) -> Booking:
        """Stage *booking* in the current transaction without committing."""
        self.session.add(booking)
        self.session.flush()
        return booking

    def create(self, booking: Booking) -> Booking:
        self.session.add(booking)
        self.session.commit()
        self.session.refresh(booking)
        return booking

    def update(self, booking: Booking) -> Booking:
        self.session.add(booking)
        self.session.commit()
        self.session.refresh(booking)
        return booking
