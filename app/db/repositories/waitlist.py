"""Booking waitlist repository."""

import datetime
from typing import Optional

from sqlmodel import Session, and_, or_, select

from app.models.waitlist import WaitlistEntry, WaitlistStatus


class WaitlistRepository:
    """Repository for WaitlistEntry database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, entry_id: int) -> Optional[WaitlistEntry]:
        return self.session.get(WaitlistEntry, entry_id)

    def get_open_by_coach(self, coach_id: int, now: datetime.datetime) -> list[WaitlistEntry]:
        """Active entries plus notified ones whose offer lapsed before *now*."""
        statement = select(WaitlistEntry).where(
            WaitlistEntry.coach_id == coach_id,
            or_(WaitlistEntry.status == WaitlistStatus.ACTIVE,
                and_(WaitlistEntry.status == WaitlistStatus.NOTIFIED, WaitlistEntry.response_deadline < now)),
        )
        return list(self.session.exec(statement).all())

    def get_active_for_client(self, coach_id: int, client_id: int) -> Optional[WaitlistEntry]:
        statement = select(WaitlistEntry).where(
            WaitlistEntry.coach_id == coach_id,
            WaitlistEntry.client_id == client_id,
            WaitlistEntry.status == WaitlistStatus.ACTIVE,
        )
        return self.session.exec(statement).first()

    def get_expired_offers(self, now: datetime.datetime) -> list[WaitlistEntry]:
        statement = select(WaitlistEntry).where(
            WaitlistEntry.status == WaitlistStatus.NOTIFIED,
            WaitlistEntry.response_deadline < now,
        )
        return list(self.session.exec(statement).all())

    def create(self, entry: WaitlistEntry) -> WaitlistEntry:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def update(self, entry: WaitlistEntry) -> WaitlistEntry:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry
