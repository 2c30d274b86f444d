"""
Booking waitlist service.

Ranks waitlisted clients for a freed slot and runs the manual
offer-and-confirm flow.  The coach chooses whom to offer a slot to;
nothing is assigned automatically.

Entry lifecycle::

    active --notify--> notified --accept--> booked
                          |------decline--> active
                          |------expired--> active   (after the offer window)
    active | notified --cancel--> cancelled

Expiry is applied lazily.  Ranking is read-only and treats an offer
whose deadline has passed as ``active`` without writing; offering and
responding first sweep such offers back to ``active``.
"""

import datetime
import logging
from typing import Optional

from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.db.repositories.booking import BookingRepository
from app.db.repositories.waitlist import WaitlistRepository
from app.models.booking import BookingStatus
from app.models.waitlist import WaitlistEntry, WaitlistStatus
from app.scheduling.waitlist import rank_candidates
from app.schemas.waitlist import RankedCandidateResponse, WaitlistEntryCreate, WaitlistEntryResponse

logger = logging.getLogger(__name__)


class WaitlistService:
    """Service for waitlist ranking and offers."""

    def __init__(self, session: Session, offer_expiry_hours: Optional[int] = None):
        self.session = session
        self.repository = WaitlistRepository(session)
        self.booking_repo = BookingRepository(session)
        self.offer_expiry = datetime.timedelta(
            hours=settings.WAITLIST_OFFER_EXPIRY_HOURS if offer_expiry_hours is None else offer_expiry_hours)

    def add_to_waitlist(self, client_id: int, data: WaitlistEntryCreate) -> WaitlistEntryResponse:
        if self.repository.get_active_for_client(data.coach_id, client_id):
            raise ConflictError("Client is already on the waitlist", code="already_waitlisted")
        entry = WaitlistEntry(client_id=client_id, **data.model_dump())
        entry = self.repository.create(entry)
        logger.info("Client %s joined waitlist of coach %s", client_id, data.coach_id)
        return WaitlistEntryResponse.model_validate(entry)

    def get_entry(self, entry_id: int) -> WaitlistEntryResponse:
        return WaitlistEntryResponse.model_validate(self._get_entry(entry_id))

    def rank_candidates_for_slot(self, coach_id: int, date: datetime.date, start_time: datetime.time,
                                 end_time: datetime.time,
                                 now: Optional[datetime.datetime] = None) -> list[RankedCandidateResponse]:
        """Open entries fitting the slot, best candidate first.  Writes nothing."""
        now = now or datetime.datetime.utcnow()
        entries = self.repository.get_open_by_coach(coach_id, now)
        return [RankedCandidateResponse(entry_id=c.entry_id, client_id=c.client_id, priority_score=c.priority_score,
                                        days_waiting=c.days_waiting, urgency_level=c.urgency_level,
                                        preferred_days=list(c.preferred_days),
                                        preferred_time_start=c.preferred_time_start,
                                        preferred_time_end=c.preferred_time_end, )
                for c in rank_candidates(entries, date, start_time, end_time, now)]

    def get_candidates_for_cancelled_slot(self, booking_id: int,
                                          now: Optional[datetime.datetime] = None) -> list[RankedCandidateResponse]:
        """Rank candidates for the slot a cancelled booking freed."""
        booking = self.booking_repo.get_by_id(booking_id)
        if not booking:
            raise NotFoundError("Booking")
        if booking.status != BookingStatus.CANCELLED:
            raise ValidationError(f"Booking is {booking.status}, not cancelled", code="booking_not_cancelled")
        return self.rank_candidates_for_slot(booking.coach_id, booking.scheduled_date, booking.start_time,
                                             booking.end_time, now)

    def notify_candidate(self, entry_id: int, date: datetime.date, start_time: datetime.time,
                         end_time: datetime.time, now: Optional[datetime.datetime] = None) -> WaitlistEntryResponse:
        """Offer a slot to one entry; the offer stays open for the expiry window."""
        now = now or datetime.datetime.utcnow()
        self.process_expired_offers(now)
        entry = self._get_entry(entry_id)
        if entry.status != WaitlistStatus.ACTIVE:
            raise ValidationError(f"Waitlist entry is {entry.status}", code="entry_not_active")

        entry.status = WaitlistStatus.NOTIFIED
        entry.notified_at = now
        entry.response_deadline = now + self.offer_expiry
        entry.offered_slot = { "date": date.isoformat(), "start_time": start_time.isoformat(),
                               "end_time": end_time.isoformat() }
        entry.updated_at = now
        entry = self.repository.update(entry)
        logger.info("Offered %s %s to waitlist entry %s until %s", date, start_time, entry.id,
                    entry.response_deadline)
        return WaitlistEntryResponse.model_validate(entry)

    def respond_to_offer(self, entry_id: int, accept: bool,
                         now: Optional[datetime.datetime] = None) -> WaitlistEntryResponse:
        now = now or datetime.datetime.utcnow()
        self.process_expired_offers(now)
        entry = self._get_entry(entry_id)
        if entry.status != WaitlistStatus.NOTIFIED:
            raise ValidationError("No pending offer for this entry", code="no_pending_offer")

        entry.responded_at = now
        entry.updated_at = now
        if accept:
            entry.status = WaitlistStatus.BOOKED
        else:
            _reset_offer(entry)
        entry = self.repository.update(entry)
        logger.info("Waitlist entry %s %s its offer", entry.id, "accepted" if accept else "declined")
        return WaitlistEntryResponse.model_validate(entry)

    def process_expired_offers(self, now: Optional[datetime.datetime] = None) -> int:
        """Return offers past their deadline to ``active``; returns how many."""
        now = now or datetime.datetime.utcnow()
        expired = self.repository.get_expired_offers(now)
        if not expired:
            return 0
        try:
            for entry in expired:
                _reset_offer(entry)
                entry.updated_at = now
                self.session.add(entry)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info("Expired %s waitlist offer(s)", len(expired))
        return len(expired)

    def cancel_entry(self, entry_id: int) -> WaitlistEntryResponse:
        entry = self._get_entry(entry_id)
        if entry.status not in (WaitlistStatus.ACTIVE, WaitlistStatus.NOTIFIED):
            raise ValidationError(f"Waitlist entry is {entry.status}", code="entry_not_active")
        entry.status = WaitlistStatus.CANCELLED
        entry.updated_at = datetime.datetime.utcnow()
        entry = self.repository.update(entry)
        return WaitlistEntryResponse.model_validate(entry)

    def _get_entry(self, entry_id: int) -> WaitlistEntry:
        entry = self.repository.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Waitlist entry")
        return entry


def _reset_offer(entry: WaitlistEntry) -> None:
    entry.status = WaitlistStatus.ACTIVE
    entry.notified_at = None
    entry.response_deadline = None
    entry.offered_slot = None
