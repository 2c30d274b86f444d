"""SQLModel database models."""

from app.models.user import User
from app.models.split_plan import SplitPlan
from app.models.training_cycle import TrainingCycle
from app.models.workout import Workout
from app.models.cycle_completion import CycleCompletion
from app.models.split_modification import SplitModification
from app.models.coach_client import CoachClientRelationship
from app.models.coach_availability import CoachAvailability
from app.models.coach_block import CoachBlock
from app.models.booking import Booking
from app.models.booking_notification import BookingNotification
from app.models.waitlist import WaitlistEntry

__all__ = [
    "User",
    "SplitPlan",
    "TrainingCycle",
    "Workout",
    "CycleCompletion",
    "SplitModification",
    "CoachClientRelationship",
    "CoachAvailability",
    "CoachBlock",
    "Booking",
    "BookingNotification",
    "WaitlistEntry",
]
