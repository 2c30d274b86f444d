"""
Booking service.

Single bookings, recurring series, series cancellation, coach
availability and coach blocks.

**Slot checks** use :func:`app.scheduling.conflicts.find_slot_conflict`
for both the availability preview and the write path, so a date shown
as available is only skipped at write time if something changed in
between.  Writes lock the coach's user row first, which serializes
concurrent booking writes for the same coach.

**Recurring series** (partial success)::

    dates  = generate_occurrence_dates(base date, pattern)
    for each date: conflict ? skipped.append({date, reason}) : insert
    return {series_id, created, skipped}

All created occurrences share one ``recurring_series_id`` and get a
0-based ``occurrence_index`` in chronological order.  With
``skip_conflicts=False`` any conflict aborts and nothing is written.
Confirmation and reminder notifications are queued after commit.
"""

import datetime
import logging
import uuid
from typing import Iterable, Optional

from sqlmodel import Session

from app.core.config import settings
from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.db.repositories.booking import BookingRepository
from app.db.repositories.coach_availability import CoachAvailabilityRepository
from app.db.repositories.coach_block import CoachBlockRepository
from app.db.repositories.coach_client import CoachClientRepository
from app.db.repositories.user import UserRepository
from app.models.booking import Booking, BookingStatus
from app.models.coach_availability import CoachAvailability
from app.models.coach_block import CoachBlock
from app.models.user import User
from app.scheduling.conflicts import find_slot_conflict
from app.scheduling.recurrence import generate_occurrence_dates
from app.schemas.booking import (AvailabilityResponse, AvailabilitySlot, BookingCreate, BookingResponse,
                                 CoachBlockCreate, CoachBlockResponse, DateAvailability, RecurringPattern,
                                 RecurringSeriesResponse, SkippedOccurrence, UpcomingBookingResponse, )
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

CANCEL_SCOPES = ("single", "following", "all")


class BookingService:
    """Service for coach bookings and recurring series."""

    def __init__(self, session: Session, max_occurrences: Optional[int] = None,
                 notifications: Optional[NotificationService] = None):
        self.session = session
        self.user_repo = UserRepository(session)
        self.booking_repo = BookingRepository(session)
        self.availability_repo = CoachAvailabilityRepository(session)
        self.block_repo = CoachBlockRepository(session)
        self.relationship_repo = CoachClientRepository(session)
        self.notifications = notifications or NotificationService(session)
        self.max_occurrences = settings.RECURRING_MAX_OCCURRENCES if max_occurrences is None else max_occurrences

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def ensure_access(self, user: User, coach_id: int, client_id: Optional[int] = None) -> None:
        """Allow the coach, or a client with an active relationship to the coach.

        When *client_id* is given a client may only act for themselves.
        """
        if user.id == coach_id:
            return
        if client_id is not None and user.id != client_id:
            raise AuthorizationError("Cannot act on another client's bookings")
        if not self.relationship_repo.get_active(coach_id, user.id):
            raise AuthorizationError("No active relationship with this coach")

    # ------------------------------------------------------------------
    # Single bookings
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: int) -> BookingResponse:
        return BookingResponse.model_validate(self._get_booking(booking_id))

    def get_coach_bookings(self, coach_id: int, start: datetime.date, end: datetime.date) -> list[BookingResponse]:
        return [BookingResponse.model_validate(b) for b in self.booking_repo.get_by_coach_range(coach_id, start, end)]

    def create_booking(self, data: BookingCreate) -> BookingResponse:
        """Book one slot.

        Raises:
            ConflictError: The slot is blocked, outside availability or taken.
        """
        try:
            self._lock_coach(data.coach_id)
            blocks, availability, bookings = self._slot_context(data.coach_id, [data.scheduled_date])
            reason = find_slot_conflict(data.scheduled_date, data.start_time, data.end_time, blocks=blocks,
                                        availability=availability, bookings=bookings,
                                        location_type=data.location_type)
            if reason:
                raise ConflictError("Selected time slot is not available", code="slot_unavailable",
                                    details={ "date": data.scheduled_date.isoformat(), "reason": reason })
            booking = self.booking_repo.add(self._new_booking(data, data.scheduled_date))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(booking)
        logger.info("Booked %s %s-%s for coach %s, client %s", booking.scheduled_date, booking.start_time,
                    booking.end_time, booking.coach_id, booking.client_id)
        self.notifications.notify_created([booking])
        return BookingResponse.model_validate(booking)

    def cancel_booking(self, booking_id: int, reason: Optional[str] = None) -> BookingResponse:
        booking = self._transition(booking_id, BookingStatus.CANCELLED, reason=reason)
        self.notifications.notify_cancelled([booking])
        return BookingResponse.model_validate(booking)

    def complete_booking(self, booking_id: int) -> BookingResponse:
        return BookingResponse.model_validate(self._transition(booking_id, BookingStatus.COMPLETED))

    def mark_no_show(self, booking_id: int) -> BookingResponse:
        return BookingResponse.model_validate(self._transition(booking_id, BookingStatus.NO_SHOW))

    def reschedule_booking(self, booking_id: int, scheduled_date: datetime.date, start_time: datetime.time,
                           end_time: datetime.time) -> BookingResponse:
        """Move a confirmed booking to another slot of the same coach.

        The booking does not conflict with itself.  Pending reminders are
        replaced by ones for the new date after commit.

        Raises:
            ValidationError: The booking is not confirmed.
            ConflictError: The new slot is blocked, outside availability
                or taken.
        """
        try:
            booking = self._get_booking(booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise ValidationError(f"Booking is already {booking.status}", code="invalid_transition",
                                      details={ "status": booking.status, "requested": "reschedule" })
            self._lock_coach(booking.coach_id)
            blocks, availability, bookings = self._slot_context(booking.coach_id, [scheduled_date])
            others = [b for b in bookings if b.id != booking.id]
            reason = find_slot_conflict(scheduled_date, start_time, end_time, blocks=blocks,
                                        availability=availability, bookings=others,
                                        location_type=booking.location_type)
            if reason:
                raise ConflictError("Selected time slot is not available", code="slot_unavailable",
                                    details={ "date": scheduled_date.isoformat(), "reason": reason })

            start = datetime.datetime.combine(scheduled_date, start_time)
            end = datetime.datetime.combine(scheduled_date, end_time)
            booking.scheduled_date = scheduled_date
            booking.start_time = start_time
            booking.end_time = end_time
            booking.duration_minutes = int((end - start).total_seconds() // 60)
            booking.updated_at = datetime.datetime.utcnow()
            self.booking_repo.add(booking)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(booking)
        logger.info("Booking %s moved to %s %s-%s", booking.id, booking.scheduled_date, booking.start_time,
                    booking.end_time)
        self.notifications.notify_rescheduled([booking])
        return BookingResponse.model_validate(booking)

    def get_client_bookings(self, client_id: int, start: Optional[datetime.date] = None,
                            end: Optional[datetime.date] = None) -> list[BookingResponse]:
        return [BookingResponse.model_validate(b) for b in self.booking_repo.get_by_client(client_id, start, end)]

    def get_client_upcoming_bookings(self, client_id: int, today: Optional[datetime.date] = None,
                                     limit: int = 10) -> list[UpcomingBookingResponse]:
        """Confirmed bookings from *today* on, soonest first, with days remaining."""
        today = today or datetime.date.today()
        return [UpcomingBookingResponse(**BookingResponse.model_validate(b).model_dump(),
                                        days_until=(b.scheduled_date - today).days)
                for b in self.booking_repo.get_upcoming_for_client(client_id, today, limit)]

    # ------------------------------------------------------------------
    # Recurring series
    # ------------------------------------------------------------------

    def check_recurring_availability(self, coach_id: int, dates: Iterable[datetime.date],
                                     start_time: datetime.time, end_time: datetime.time,
                                     location_type: str = "in_person") -> list[DateAvailability]:
        """One ``{date, available, reason}`` per input date, in input order.

        *location_type* defaults to the booking default, so a preview and
        the series created from the same request see the same windows.
        """
        dates = list(dates)
        if not dates:
            return []
        blocks, availability, bookings = self._slot_context(coach_id, dates)
        results = []
        for date in dates:
            reason = find_slot_conflict(date, start_time, end_time, blocks=blocks, availability=availability,
                                        bookings=bookings, location_type=location_type)
            results.append(DateAvailability(date=date, available=reason is None, reason=reason))
        return results

    def create_recurring_series(self, data: BookingCreate, pattern: RecurringPattern,
                                skip_conflicts: bool = True) -> RecurringSeriesResponse:
        """Create the non-conflicting occurrences of *pattern*.

        Raises:
            ConflictError: ``skip_conflicts`` is false and an occurrence
                conflicts; no booking is created.
        """
        try:
            dates = generate_occurrence_dates(data.scheduled_date, pattern.frequency, pattern.days_of_week,
                                              pattern.end_type, pattern.end_value, self.max_occurrences)
        except ValueError as exc:
            raise ValidationError(str(exc), code="invalid_pattern") from exc

        series_id = str(uuid.uuid4())
        created: list[Booking] = []
        skipped: list[SkippedOccurrence] = []
        try:
            self._lock_coach(data.coach_id)
            blocks, availability, bookings = self._slot_context(data.coach_id, dates)
            for date in dates:
                reason = find_slot_conflict(date, data.start_time, data.end_time, blocks=blocks,
                                            availability=availability, bookings=bookings,
                                            location_type=data.location_type)
                if reason:
                    if not skip_conflicts:
                        raise ConflictError(f"Slot not available for {date.isoformat()}: {reason}",
                                            code="slot_unavailable",
                                            details={ "date": date.isoformat(), "reason": reason })
                    skipped.append(SkippedOccurrence(date=date, reason=reason))
                    continue

                booking = self._new_booking(data, date)
                booking.recurring_series_id = series_id
                booking.recurring_pattern = pattern.model_dump(mode="json")
                booking.occurrence_index = len(created)
                self.booking_repo.add(booking)
                bookings.append(booking)
                created.append(booking)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        for booking in created:
            self.session.refresh(booking)
        logger.info("Series %s for coach %s: %s created, %s skipped", series_id, data.coach_id, len(created),
                    len(skipped))
        if created:
            self.notifications.notify_created(created)

        return RecurringSeriesResponse(series_id=series_id,
                                       created=[BookingResponse.model_validate(b) for b in created],
                                       skipped=skipped, )

    def get_series_bookings(self, series_id: str) -> list[BookingResponse]:
        bookings = self.booking_repo.get_series(series_id)
        if not bookings:
            raise NotFoundError("Series")
        return [BookingResponse.model_validate(b) for b in bookings]

    def cancel_series(self, series_id: str, scope: str, booking_id: Optional[int] = None,
                      reason: Optional[str] = None, now: Optional[datetime.datetime] = None) -> int:
        """Cancel one occurrence, an occurrence and all later ones, or the whole series.

        Only ``confirmed`` occurrences change.  Returns the number cancelled.
        """
        if scope not in CANCEL_SCOPES:
            raise ValidationError(f"Unknown scope: {scope!r}", code="invalid_scope")
        if not self.booking_repo.get_series(series_id):
            raise NotFoundError("Series")

        if scope == "all":
            targets = self.booking_repo.get_confirmed_in_series(series_id)
        else:
            if booking_id is None:
                raise ValidationError(f"Scope '{scope}' requires booking_id", code="booking_id_required")
            anchor = self.booking_repo.get_by_id(booking_id)
            if not anchor or anchor.recurring_series_id != series_id:
                raise NotFoundError("Booking", f"Booking {booking_id} is not part of series {series_id}")
            if scope == "single":
                targets = [anchor] if anchor.status == BookingStatus.CONFIRMED else []
            else:
                targets = self.booking_repo.get_confirmed_in_series(series_id, from_index=anchor.occurrence_index)

        now = now or datetime.datetime.utcnow()
        try:
            for booking in targets:
                booking.status = BookingStatus.CANCELLED
                booking.cancellation_reason = reason
                booking.cancelled_at = now
                booking.updated_at = now
                self.booking_repo.add(booking)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("Cancelled %s occurrence(s) of series %s (scope=%s)", len(targets), series_id, scope)
        if targets:
            self.notifications.notify_cancelled(targets)
        return len(targets)

    # ------------------------------------------------------------------
    # Availability & blocks
    # ------------------------------------------------------------------

    def set_availability(self, coach_id: int, slots: list[AvailabilitySlot]) -> list[AvailabilityResponse]:
        windows = [CoachAvailability(coach_id=coach_id, date=s.date, start_time=s.start_time, end_time=s.end_time,
                                     location_type=s.location_type, is_available=s.is_available, ) for s in slots]
        saved = self.availability_repo.upsert_many(windows)
        logger.info("Coach %s set %s availability slot(s)", coach_id, len(saved))
        return [AvailabilityResponse.model_validate(w) for w in saved]

    def get_coach_availability(self, coach_id: int, start: datetime.date,
                               end: datetime.date) -> list[AvailabilityResponse]:
        return [AvailabilityResponse.model_validate(w) for w in self.availability_repo.get_range(coach_id, start, end)]

    def clear_availability(self, coach_id: int, start: datetime.date, end: Optional[datetime.date] = None) -> int:
        """Remove the coach's windows from *start* to *end* (one day if *end* is omitted)."""
        end = end or start
        if end < start:
            raise ValidationError("end must not be before start", code="invalid_range")
        removed = self.availability_repo.delete_range(coach_id, start, end)
        logger.info("Coach %s cleared %s availability slot(s) %s..%s", coach_id, removed, start, end)
        return removed

    def copy_last_week_availability(self, coach_id: int, week_start: datetime.date) -> list[AvailabilityResponse]:
        """Copy the windows of the 7 days before *week_start* onto the week starting there.

        Each window keeps its offset from the start of its week.  Returns
        the saved windows; an empty previous week copies nothing.
        """
        previous = self.availability_repo.get_range(coach_id, week_start - datetime.timedelta(days=7),
                                                    week_start - datetime.timedelta(days=1))
        if not previous:
            return []
        slots = [AvailabilitySlot(date=w.date + datetime.timedelta(days=7), start_time=w.start_time,
                                  end_time=w.end_time, location_type=w.location_type or "in_person")
                 for w in previous]
        return self.set_availability(coach_id, slots)

    def create_block(self, coach_id: int, data: CoachBlockCreate) -> CoachBlockResponse:
        block = self.block_repo.create(CoachBlock(coach_id=coach_id, **data.model_dump()))
        logger.info("Coach %s blocked %s..%s", coach_id, block.start_date, block.end_date)
        return CoachBlockResponse.model_validate(block)

    def delete_block(self, coach_id: int, block_id: int) -> None:
        block = self.block_repo.get_by_id(block_id)
        if not block or block.coach_id != coach_id:
            raise NotFoundError("Block")
        self.block_repo.delete(block_id)

    def get_blocks(self, coach_id: int, start: datetime.date, end: datetime.date) -> list[CoachBlockResponse]:
        return [CoachBlockResponse.model_validate(b) for b in self.block_repo.get_overlapping(coach_id, start, end)]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self.booking_repo.get_by_id(booking_id)
        if not booking:
            raise NotFoundError("Booking")
        return booking

    def _lock_coach(self, coach_id: int) -> None:
        if not self.user_repo.get_by_id_for_update(coach_id):
            raise NotFoundError("Coach")

    def _slot_context(self, coach_id: int, dates: list[datetime.date]):
        """Blocks, availability windows and confirmed bookings relevant to *dates*."""
        if not dates:
            return [], [], []
        blocks = self.block_repo.get_overlapping(coach_id, min(dates), max(dates))
        availability = self.availability_repo.get_for_dates(coach_id, dates)
        bookings = self.booking_repo.get_confirmed_for_coach(coach_id, dates)
        return blocks, availability, bookings

    @staticmethod
    def _new_booking(data: BookingCreate, date: datetime.date) -> Booking:
        start = datetime.datetime.combine(date, data.start_time)
        end = datetime.datetime.combine(date, data.end_time)
        return Booking(coach_id=data.coach_id, client_id=data.client_id, scheduled_date=date,
                       start_time=data.start_time, end_time=data.end_time,
                       duration_minutes=int((end - start).total_seconds() // 60), location_type=data.location_type,
                       client_notes=data.client_notes, status=BookingStatus.CONFIRMED, )

    def _transition(self, booking_id: int, status: str, reason: Optional[str] = None) -> Booking:
        booking = self._get_booking(booking_id)
        if booking.status in BookingStatus.TERMINAL:
            raise ValidationError(f"Booking is already {booking.status}", code="invalid_transition",
                                  details={ "status": booking.status, "requested": status })
        now = datetime.datetime.utcnow()
        booking.status = status
        booking.updated_at = now
        if status == BookingStatus.CANCELLED:
            booking.cancellation_reason = reason
            booking.cancelled_at = now
        elif status == BookingStatus.COMPLETED:
            booking.completed_at = now
        booking = self.booking_repo.update(booking)
        logger.info("Booking %s -> %s", booking.id, status)
        return booking
