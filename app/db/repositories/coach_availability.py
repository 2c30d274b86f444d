"""Coach availability repository."""

import datetime
from typing import Iterable

from sqlmodel import Session, select

from app.models.coach_availability import CoachAvailability


class CoachAvailabilityRepository:
    """Repository for CoachAvailability database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_for_dates(self, coach_id: int, dates: Iterable[datetime.date]) -> list[CoachAvailability]:
        statement = select(CoachAvailability).where(
            CoachAvailability.coach_id == coach_id,
            CoachAvailability.date.in_(list(dates)),
            CoachAvailability.is_available == True,  # noqa: E712
        )
        return list(self.session.exec(statement).all())

    def get_range(self, coach_id: int, start: datetime.date, end: datetime.date) -> list[CoachAvailability]:
        statement = (select(CoachAvailability)
                     .where(CoachAvailability.coach_id == coach_id, CoachAvailability.date >= start,
                            CoachAvailability.date <= end, CoachAvailability.is_available == True)  # noqa: E712
                     .order_by(CoachAvailability.date, CoachAvailability.start_time))
        return list(self.session.exec(statement).all())

    def find_slot(self, coach_id: int, date: datetime.date, start_time: datetime.time,
                  location_type: str) -> CoachAvailability | None:
        statement = select(CoachAvailability).where(
            CoachAvailability.coach_id == coach_id,
            CoachAvailability.date == date,
            CoachAvailability.start_time == start_time,
            CoachAvailability.location_type == location_type,
        )
        return self.session.exec(statement).first()

    def upsert_many(self, windows: list[CoachAvailability]) -> list[CoachAvailability]:
        """Insert windows, replacing the end time of existing same-start slots."""
        saved = []
        for window in windows:
            existing = self.find_slot(window.coach_id, window.date, window.start_time, window.location_type)
            if existing:
                existing.end_time = window.end_time
                existing.is_available = window.is_available
                existing.updated_at = datetime.datetime.utcnow()
                window = existing
            self.session.add(window)
            saved.append(window)
        self.session.commit()
        for window in saved:
            self.session.refresh(window)
        return saved

    def delete_range(self, coach_id: int, start: datetime.date, end: datetime.date) -> int:
        """Delete every window of the coach between *start* and *end*, inclusive."""
        statement = select(CoachAvailability).where(
            CoachAvailability.coach_id == coach_id,
            CoachAvailability.date >= start,
            CoachAvailability.date <= end,
        )
        windows = list(self.session.exec(statement).all())
        for window in windows:
            self.session.delete(window)
        self.session.commit()
        return len(windows)
