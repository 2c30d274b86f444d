"""Booking notification queue repository."""

from typing import Iterable

from sqlmodel import Session, select

from app.models.booking_notification import BookingNotification


class NotificationRepository:
    """Repository for BookingNotification database operations."""

    def __init__(self, session: Session):
        self.session = session

    def add_many(self, notifications: list[BookingNotification]) -> list[BookingNotification]:
        """Stage *notifications* without committing."""
        self.session.add_all(notifications)
        self.session.flush()
        return notifications

    def delete_pending(self, booking_id: int, notification_types: Iterable[str]) -> int:
        """Stage deletion of pending notifications of the given types."""
        statement = select(BookingNotification).where(
            BookingNotification.booking_id == booking_id,
            BookingNotification.notification_type.in_(list(notification_types)),
            BookingNotification.status == "pending",
        )
        pending = list(self.session.exec(statement).all())
        for notification in pending:
            self.session.delete(notification)
        self.session.flush()
        return len(pending)

    def get_by_booking(self, booking_id: int) -> list[BookingNotification]:
        statement = (select(BookingNotification)
                     .where(BookingNotification.booking_id == booking_id)
                     .order_by(BookingNotification.id))
        return list(self.session.exec(statement).all())
