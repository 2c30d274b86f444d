"""Pydantic schemas for request/response validation."""

from app.schemas.result import ActionError, ActionResult
from app.schemas.user import Token, UserCreate, UserLogin, UserResponse
from app.schemas.cycle import (
    AdvanceCycleResponse,
    CycleComparisonResponse,
    CycleCompletionResponse,
    CycleStatsResponse,
    NextWorkoutResponse,
)
from app.schemas.split_plan import (
    ChangeVariationRequest,
    SplitModificationResponse,
    SplitPlanResponse,
    SwapDaysRequest,
    ToggleMuscleRequest,
    UndoResponse,
)
from app.schemas.booking import (
    AvailabilityCheckRequest,
    AvailabilityResponse,
    AvailabilitySlot,
    BookingCreate,
    BookingResponse,
    CancelSeriesRequest,
    CoachBlockCreate,
    CoachBlockResponse,
    DateAvailability,
    RecurringPattern,
    RecurringSeriesCreate,
    RecurringSeriesResponse,
    SkippedOccurrence,
)
from app.schemas.waitlist import RankedCandidateResponse, WaitlistEntryCreate, WaitlistEntryResponse

__all__ = [
    "ActionError",
    "ActionResult",
    "Token",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "AdvanceCycleResponse",
    "CycleComparisonResponse",
    "CycleCompletionResponse",
    "CycleStatsResponse",
    "NextWorkoutResponse",
    "ChangeVariationRequest",
    "SplitModificationResponse",
    "SplitPlanResponse",
    "SwapDaysRequest",
    "ToggleMuscleRequest",
    "UndoResponse",
    "AvailabilityCheckRequest",
    "AvailabilityResponse",
    "AvailabilitySlot",
    "BookingCreate",
    "BookingResponse",
    "CancelSeriesRequest",
    "CoachBlockCreate",
    "CoachBlockResponse",
    "DateAvailability",
    "RecurringPattern",
    "RecurringSeriesCreate",
    "RecurringSeriesResponse",
    "SkippedOccurrence",
    "RankedCandidateResponse",
    "WaitlistEntryCreate",
    "WaitlistEntryResponse",
]
