"""
Booking API schemas.

Single bookings, recurrence patterns, availability previews and series
results.  Days of week use 0=Sunday .. 6=Saturday.
"""

import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

LocationType = Literal["in_person", "online", "hybrid"]


class BookingCreate(BaseModel):
    coach_id: int
    client_id: int
    scheduled_date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    location_type: LocationType = "in_person"
    client_notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class RecurringPattern(BaseModel):
    """Recurrence over the base booking's time slot."""

    frequency: Literal["weekly", "biweekly"]
    days_of_week: list[int] = Field(..., min_length=1, description="0=Sunday .. 6=Saturday")
    end_type: Literal["count", "date"]
    end_value: Union[int, datetime.date]

    @model_validator(mode="after")
    def check_pattern(self):
        if any(d < 0 or d > 6 for d in self.days_of_week):
            raise ValueError("days_of_week values must be in 0..6")
        if self.end_type == "count":
            if not isinstance(self.end_value, int) or self.end_value < 1:
                raise ValueError("count end requires a positive integer end_value")
        elif not isinstance(self.end_value, datetime.date):
            raise ValueError("date end requires a date end_value")
        return self


class RecurringSeriesCreate(BaseModel):
    booking: BookingCreate
    pattern: RecurringPattern
    skip_conflicts: bool = True


class AvailabilityCheckRequest(BaseModel):
    coach_id: int
    dates: list[datetime.date] = Field(..., min_length=1)
    start_time: datetime.time
    end_time: datetime.time
    location_type: LocationType = "in_person"

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class DateAvailability(BaseModel):
    date: datetime.date
    available: bool
    reason: Optional[str] = None


class SkippedOccurrence(BaseModel):
    date: datetime.date
    reason: str


class BookingResponse(BaseModel):
    id: int
    coach_id: int
    client_id: int
    scheduled_date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    duration_minutes: int
    location_type: str
    status: str
    recurring_series_id: Optional[str]
    occurrence_index: Optional[int]
    client_notes: Optional[str]
    cancellation_reason: Optional[str]
    cancelled_at: Optional[datetime.datetime]
    completed_at: Optional[datetime.datetime]
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class RecurringSeriesResponse(BaseModel):
    series_id: str
    created: list[BookingResponse]
    skipped: list[SkippedOccurrence]


class UpcomingBookingResponse(BookingResponse):
    days_until: int


class CancelBookingRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class RescheduleBookingRequest(BaseModel):
    scheduled_date: datetime.date
    start_time: datetime.time
    end_time: datetime.time

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class CancelSeriesRequest(BaseModel):
    scope: Literal["single", "following", "all"]
    booking_id: Optional[int] = None
    reason: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_booking_id(self):
        if self.scope in ("single", "following") and self.booking_id is None:
            raise ValueError(f"scope '{self.scope}' requires booking_id")
        return self


class CancelSeriesResponse(BaseModel):
    cancelled: int


class AvailabilitySlot(BaseModel):
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    location_type: LocationType = "in_person"
    is_available: bool = True

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AvailabilityResponse(BaseModel):
    id: int
    coach_id: int
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time
    location_type: str
    is_available: bool

    class Config:
        from_attributes = True


class CopyWeekRequest(BaseModel):
    week_start: datetime.date = Field(..., description="First day of the target week")


class ClearAvailabilityResponse(BaseModel):
    removed: int


class CoachBlockCreate(BaseModel):
    block_type: Literal["competition", "travel", "study", "personal", "custom"] = "personal"
    custom_reason: Optional[str] = Field(None, max_length=255)
    start_date: datetime.date
    end_date: datetime.date
    start_time: Optional[datetime.time] = None
    end_time: Optional[datetime.time] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_window(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be given together")
        if self.start_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class CoachBlockResponse(BaseModel):
    id: int
    coach_id: int
    block_type: str
    custom_reason: Optional[str]
    start_date: datetime.date
    end_date: datetime.date
    start_time: Optional[datetime.time]
    end_time: Optional[datetime.time]
    notes: Optional[str]

    class Config:
        from_attributes = True
