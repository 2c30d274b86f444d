"""Tests for WaitlistService ranking and the offer flow."""

import datetime

import pytest

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.booking import Booking, BookingStatus
from app.models.waitlist import WaitlistEntry, WaitlistStatus
from app.schemas.waitlist import WaitlistEntryCreate
from app.services.waitlist_service import WaitlistService

NOW = datetime.datetime(2030, 1, 7, 8, 0)
MONDAY = NOW.date()
NINE, TEN = datetime.time(9, 0), datetime.time(10, 0)


@pytest.fixture
def service(session):
    return WaitlistService(session)


@pytest.fixture
def add_entry(session, coach, make_user):
    def _add(priority=50, waited_days=0, days=None, status=WaitlistStatus.ACTIVE) -> WaitlistEntry:
        entry = WaitlistEntry(coach_id=coach.id, client_id=make_user().id, priority_score=priority,
                              preferred_days=days or [], status=status,
                              created_at=NOW - datetime.timedelta(days=waited_days))
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry

    return _add


class TestAddToWaitlist:
    def test_add(self, service, coach, client_user):
        entry = service.add_to_waitlist(client_user.id, WaitlistEntryCreate(coach_id=coach.id, preferred_days=[1]))
        assert entry.status == WaitlistStatus.ACTIVE
        assert entry.client_id == client_user.id

    def test_one_active_entry_per_coach(self, service, coach, client_user):
        service.add_to_waitlist(client_user.id, WaitlistEntryCreate(coach_id=coach.id))
        with pytest.raises(ConflictError) as exc_info:
            service.add_to_waitlist(client_user.id, WaitlistEntryCreate(coach_id=coach.id))
        assert exc_info.value.code == "already_waitlisted"

    def test_cancel_entry(self, service, coach, client_user):
        entry = service.add_to_waitlist(client_user.id, WaitlistEntryCreate(coach_id=coach.id))
        assert service.cancel_entry(entry.id).status == WaitlistStatus.CANCELLED
        with pytest.raises(ValidationError):
            service.cancel_entry(entry.id)


class TestRankCandidatesForSlot:
    def test_ranking(self, service, coach, add_entry):
        low = add_entry(priority=40)
        old = add_entry(priority=80, waited_days=9)
        new = add_entry(priority=80, waited_days=1)
        add_entry(priority=99, days=[3])
        add_entry(priority=99, status=WaitlistStatus.BOOKED)

        ranked = service.rank_candidates_for_slot(coach.id, MONDAY, NINE, TEN, now=NOW)
        assert [c.entry_id for c in ranked] == [old.id, new.id, low.id]
        assert ranked[0].days_waiting == 9

    def test_lapsed_offers_rejoin_ranking_without_writes(self, service, session, coach, add_entry):
        entry = add_entry(priority=70)
        service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        assert service.rank_candidates_for_slot(coach.id, MONDAY, NINE, TEN, now=NOW) == []

        later = NOW + datetime.timedelta(hours=5)
        ranked = service.rank_candidates_for_slot(coach.id, MONDAY, NINE, TEN, now=later)
        assert [c.entry_id for c in ranked] == [entry.id]

        session.expire_all()
        stored = service.get_entry(entry.id)
        assert stored.status == WaitlistStatus.NOTIFIED
        assert stored.offered_slot is not None

    def test_lapsed_offer_can_be_offered_again(self, service, add_entry):
        entry = add_entry()
        service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        later = NOW + datetime.timedelta(hours=5)
        offered = service.notify_candidate(entry.id, MONDAY, TEN, datetime.time(11, 0), now=later)
        assert offered.status == WaitlistStatus.NOTIFIED
        assert offered.response_deadline == later + datetime.timedelta(hours=4)
        assert offered.offered_slot["start_time"] == "10:00:00"


class TestCandidatesForCancelledSlot:
    @pytest.fixture
    def booking(self, session, coach, client_user):
        def _booking(status=BookingStatus.CANCELLED) -> Booking:
            row = Booking(coach_id=coach.id, client_id=client_user.id, scheduled_date=MONDAY, start_time=NINE,
                          end_time=TEN, duration_minutes=60, status=status)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row

        return _booking

    def test_ranks_for_the_freed_slot(self, service, add_entry, booking):
        monday = add_entry(priority=60, days=[1])
        add_entry(priority=90, days=[2])
        anyday = add_entry(priority=80)

        ranked = service.get_candidates_for_cancelled_slot(booking().id, now=NOW)
        assert [c.entry_id for c in ranked] == [anyday.id, monday.id]

    def test_booking_must_be_cancelled(self, service, booking):
        with pytest.raises(ValidationError) as exc_info:
            service.get_candidates_for_cancelled_slot(booking(BookingStatus.CONFIRMED).id, now=NOW)
        assert exc_info.value.code == "booking_not_cancelled"

    def test_unknown_booking(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.get_candidates_for_cancelled_slot(999, now=NOW)
        assert exc_info.value.code == "booking_not_found"


class TestOfferFlow:
    def test_notify_sets_deadline(self, service, add_entry):
        entry = add_entry()
        offered = service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        assert offered.status == WaitlistStatus.NOTIFIED
        assert offered.response_deadline == NOW + datetime.timedelta(hours=4)
        assert offered.offered_slot == { "date": "2030-01-07", "start_time": "09:00:00", "end_time": "10:00:00" }

    def test_notify_requires_active(self, service, add_entry):
        entry = add_entry()
        service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        with pytest.raises(ValidationError) as exc_info:
            service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        assert exc_info.value.code == "entry_not_active"

    def test_accept(self, service, add_entry):
        entry = add_entry()
        service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        accepted = service.respond_to_offer(entry.id, True, now=NOW + datetime.timedelta(hours=1))
        assert accepted.status == WaitlistStatus.BOOKED
        assert accepted.responded_at is not None

    def test_decline_returns_to_active(self, service, add_entry):
        entry = add_entry()
        service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        declined = service.respond_to_offer(entry.id, False, now=NOW + datetime.timedelta(hours=1))
        assert declined.status == WaitlistStatus.ACTIVE
        assert declined.response_deadline is None

    def test_late_response_rejected(self, service, add_entry):
        entry = add_entry()
        service.notify_candidate(entry.id, MONDAY, NINE, TEN, now=NOW)
        with pytest.raises(ValidationError) as exc_info:
            service.respond_to_offer(entry.id, True, now=NOW + datetime.timedelta(hours=4, minutes=1))
        assert exc_info.value.code == "no_pending_offer"

    def test_process_expired_offers(self, service, add_entry):
        first, second = add_entry(), add_entry()
        service.notify_candidate(first.id, MONDAY, NINE, TEN, now=NOW)
        service.notify_candidate(second.id, MONDAY, NINE, TEN, now=NOW + datetime.timedelta(hours=2))
        assert service.process_expired_offers(NOW + datetime.timedelta(hours=5)) == 1
        assert service.get_entry(first.id).status == WaitlistStatus.ACTIVE
        assert service.get_entry(second.id).status == WaitlistStatus.NOTIFIED

    def test_unknown_entry(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            service.respond_to_offer(999, True, now=NOW)
        assert exc_info.value.code == "waitlist_entry_not_found"
