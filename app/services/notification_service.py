"""
Booking notification queueing.

Writes ``pending`` rows to ``booking_notifications``; an external
dispatcher delivers them.  Queueing always happens after the booking
write it belongs to has been committed, through :meth:`notify_safely`,
so a failure here is logged and never undoes the booking.

Per booking:

* confirmation: client, in-app and email, due now;
* reminder: client in-app and email plus coach in-app, due at
  ``REMINDER_HOUR`` the day before, skipped if that is already past;
  replaces earlier pending reminders;
* cancellation: client, in-app and email, due now; drops pending
  reminders;
* reschedule: client, in-app and email, due now; drops pending
  reminders, which are then queued again for the new date.
"""

import datetime
import logging
from typing import Callable, Iterable, Optional

from sqlmodel import Session

from app.core.config import settings
from app.db.repositories.notification import NotificationRepository
from app.models.booking import Booking
from app.models.booking_notification import BookingNotification, NotificationType

logger = logging.getLogger(__name__)

CLIENT_CHANNELS = ("in_app", "email")


class NotificationService:
    """Service queueing booking notifications."""

    def __init__(self, session: Session, reminder_hour: Optional[int] = None):
        self.session = session
        self.repository = NotificationRepository(session)
        self.reminder_hour = settings.REMINDER_HOUR if reminder_hour is None else reminder_hour

    # ------------------------------------------------------------------
    # Queueing
    # ------------------------------------------------------------------

    def queue_booking_confirmation(self, booking: Booking, now: Optional[datetime.datetime] = None) -> int:
        now = now or datetime.datetime.utcnow()
        payload = { "scheduled_date": booking.scheduled_date.isoformat(),
                    "start_time": booking.start_time.isoformat() }
        notifications = [
            _notification(booking, booking.client_id, NotificationType.BOOKING_CONFIRMED, channel, now, payload)
            for channel in CLIENT_CHANNELS]
        self.repository.add_many(notifications)
        return len(notifications)

    def queue_reminder(self, booking: Booking, now: Optional[datetime.datetime] = None) -> int:
        """Queue the day-before reminders; returns 0 if the reminder time has passed."""
        now = now or datetime.datetime.utcnow()
        remind_at = self.reminder_time(booking)
        if remind_at <= now:
            return 0

        payload = { "scheduled_date": booking.scheduled_date.isoformat(),
                    "start_time": booking.start_time.isoformat() }
        notifications = [
            _notification(booking, booking.client_id, NotificationType.REMINDER_24H, channel, remind_at, payload)
            for channel in CLIENT_CHANNELS]
        notifications.append(_notification(booking, booking.coach_id, NotificationType.REMINDER_24H, "in_app",
                                           remind_at, { **payload, "client_id": booking.client_id }))

        self.repository.delete_pending(booking.id, [NotificationType.REMINDER_24H])
        self.repository.add_many(notifications)
        return len(notifications)

    def queue_cancellation_notification(self, booking: Booking, now: Optional[datetime.datetime] = None) -> int:
        now = now or datetime.datetime.utcnow()
        payload = { "cancelled_date": booking.scheduled_date.isoformat(),
                    "cancelled_time": booking.start_time.isoformat(),
                    "reason": booking.cancellation_reason }
        notifications = [
            _notification(booking, booking.client_id, NotificationType.BOOKING_CANCELLED, channel, now, payload)
            for channel in CLIENT_CHANNELS]

        self.repository.delete_pending(booking.id, [NotificationType.REMINDER_24H])
        self.repository.add_many(notifications)
        return len(notifications)

    def queue_reschedule_notification(self, booking: Booking, now: Optional[datetime.datetime] = None) -> int:
        now = now or datetime.datetime.utcnow()
        payload = { "new_date": booking.scheduled_date.isoformat(),
                    "new_time": booking.start_time.isoformat() }
        notifications = [
            _notification(booking, booking.client_id, NotificationType.BOOKING_RESCHEDULED, channel, now, payload)
            for channel in CLIENT_CHANNELS]

        self.repository.delete_pending(booking.id, [NotificationType.REMINDER_24H])
        self.repository.add_many(notifications)
        return len(notifications)

    def reminder_time(self, booking: Booking) -> datetime.datetime:
        day_before = booking.scheduled_date - datetime.timedelta(days=1)
        return datetime.datetime.combine(day_before, datetime.time(self.reminder_hour, 0))

    # ------------------------------------------------------------------
    # After-commit wrappers
    # ------------------------------------------------------------------

    def notify_safely(self, queue: Callable[[Booking], int], bookings: Iterable[Booking]) -> int:
        """Run *queue* for every booking and commit, swallowing failures.

        Returns the number of queued notifications (0 on failure).
        """
        bookings = list(bookings)
        try:
            queued = sum(queue(booking) for booking in bookings)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Failed to queue %s for %s booking(s)", getattr(queue, "__name__", "notifications"),
                             len(bookings))
            return 0
        return queued

    def notify_created(self, bookings: Iterable[Booking]) -> int:
        bookings = list(bookings)
        return (self.notify_safely(self.queue_booking_confirmation, bookings)
                + self.notify_safely(self.queue_reminder, bookings))

    def notify_cancelled(self, bookings: Iterable[Booking]) -> int:
        return self.notify_safely(self.queue_cancellation_notification, bookings)

    def notify_rescheduled(self, bookings: Iterable[Booking]) -> int:
        bookings = list(bookings)
        return (self.notify_safely(self.queue_reschedule_notification, bookings)
                + self.notify_safely(self.queue_reminder, bookings))


def _notification(booking: Booking, recipient_id: int, notification_type: str, channel: str,
                  scheduled_for: datetime.datetime, payload: dict) -> BookingNotification:
    return BookingNotification(booking_id=booking.id, recipient_id=recipient_id, notification_type=notification_type,
                               channel=channel, scheduled_for=scheduled_for, status="pending", payload=payload, )
