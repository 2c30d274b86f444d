"""Database repositories."""

from app.db.repositories.user import UserRepository
from app.db.repositories.training_cycle import TrainingCycleRepository
from app.db.repositories.split_plan import SplitPlanRepository
from app.db.repositories.workout import WorkoutRepository
from app.db.repositories.cycle_completion import CycleCompletionRepository
from app.db.repositories.split_modification import SplitModificationRepository
from app.db.repositories.coach_client import CoachClientRepository
from app.db.repositories.coach_availability import CoachAvailabilityRepository
from app.db.repositories.coach_block import CoachBlockRepository
from app.db.repositories.booking import BookingRepository
from app.db.repositories.notification import NotificationRepository
from app.db.repositories.waitlist import WaitlistRepository

__all__ = [
    "UserRepository",
    "TrainingCycleRepository",
    "SplitPlanRepository",
    "WorkoutRepository",
    "CycleCompletionRepository",
    "SplitModificationRepository",
    "CoachClientRepository",
    "CoachAvailabilityRepository",
    "CoachBlockRepository",
    "BookingRepository",
    "NotificationRepository",
    "WaitlistRepository",
]
