"""
Waitlist API schemas.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class WaitlistEntryCreate(BaseModel):
    coach_id: int
    preferred_days: list[int] = Field(default_factory=list, description="0=Sunday .. 6=Saturday, empty = any")
    preferred_time_start: Optional[datetime.time] = None
    preferred_time_end: Optional[datetime.time] = None
    urgency_level: int = Field(50, ge=0, le=100)
    priority_score: int = Field(50, ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_days(self):
        if any(d < 0 or d > 6 for d in self.preferred_days):
            raise ValueError("preferred_days values must be in 0..6")
        return self


class SlotQuery(BaseModel):
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class OfferRequest(SlotQuery):
    entry_id: int


class OfferResponseRequest(BaseModel):
    accept: bool


class RankedCandidateResponse(BaseModel):
    entry_id: int
    client_id: int
    priority_score: int
    days_waiting: int
    urgency_level: int
    preferred_days: list[int]
    preferred_time_start: Optional[datetime.time]
    preferred_time_end: Optional[datetime.time]


class WaitlistEntryResponse(BaseModel):
    id: int
    coach_id: int
    client_id: int
    preferred_days: list[int]
    preferred_time_start: Optional[datetime.time]
    preferred_time_end: Optional[datetime.time]
    urgency_level: int
    priority_score: int
    status: str
    offered_slot: Optional[dict]
    notified_at: Optional[datetime.datetime]
    response_deadline: Optional[datetime.datetime]
    responded_at: Optional[datetime.datetime]
    created_at: datetime.datetime

    class Config:
        from_attributes = True
