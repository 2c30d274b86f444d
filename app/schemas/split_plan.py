"""
Split plan API schemas.

Request bodies for split-plan edits and the modification log views.
``ai_validation`` is the opaque result of the external split-change
validator and is stored as-is.
"""

import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class ModificationMeta(BaseModel):
    ai_validation: dict[str, Any] = Field(default_factory=dict)
    user_override: bool = False
    user_reason: Optional[str] = Field(None, max_length=1000)


class SwapDaysRequest(ModificationMeta):
    day1: int = Field(..., ge=1)
    day2: int = Field(..., ge=1)


class ToggleMuscleRequest(ModificationMeta):
    cycle_day: int = Field(..., ge=1)
    muscle: str = Field(..., min_length=1, max_length=50)
    add: bool


class ChangeVariationRequest(ModificationMeta):
    cycle_day: int = Field(..., ge=1)
    variation: Literal["A", "B"]


class SplitPlanResponse(BaseModel):
    id: int
    split_type: str
    cycle_days: int
    sessions: list[dict[str, Any]]
    frequency_map: dict[str, Any]
    volume_distribution: dict[str, Any]
    active: bool
    updated_at: datetime.datetime

    class Config:
        from_attributes = True


class SplitModificationResponse(BaseModel):
    id: int
    split_plan_id: int
    modification_type: str
    details: dict[str, Any]
    ai_validation: dict[str, Any]
    user_override: bool
    user_reason: Optional[str]
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class UndoResponse(BaseModel):
    restored: bool
    modification_type: Optional[str] = None
    workouts_restored: int = 0
