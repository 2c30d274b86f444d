"""Business logic services."""

from app.services.user_service import UserService
from app.services.cycle_service import CycleService
from app.services.split_plan_service import SplitPlanService
from app.services.notification_service import NotificationService
from app.services.booking_service import BookingService
from app.services.waitlist_service import WaitlistService

__all__ = [
    "UserService",
    "CycleService",
    "SplitPlanService",
    "NotificationService",
    "BookingService",
    "WaitlistService",
]
