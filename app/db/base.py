"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

# Import all models for Alembic autogenerate
from app.models.user import User  # noqa: F401
from app.models.split_plan import SplitPlan  # noqa: F401
from app.models.training_cycle import TrainingCycle  # noqa: F401
from app.models.workout import Workout  # noqa: F401
from app.models.cycle_completion import CycleCompletion  # noqa: F401
from app.models.split_modification import SplitModification  # noqa: F401
from app.models.coach_client import CoachClientRelationship  # noqa: F401
from app.models.coach_availability import CoachAvailability  # noqa: F401
from app.models.coach_block import CoachBlock  # noqa: F401
from app.models.booking import Booking  # noqa: F401
from app.models.booking_notification import BookingNotification  # noqa: F401
from app.models.waitlist import WaitlistEntry  # noqa: F401
