"""
Cycle API schemas.

Responses for cycle advancement, in-progress statistics and cycle
completion history.
"""

import datetime
from typing import Any, Optional

from pydantic import BaseModel


class CycleCompletionResponse(BaseModel):
    id: int
    split_plan_id: int
    cycle_number: int
    completed_at: datetime.datetime
    total_volume: float
    total_workouts_completed: int
    total_sets: int
    total_duration_seconds: int
    avg_mental_readiness: Optional[float]
    sets_by_muscle_group: dict[str, float]
    workouts_by_type: dict[str, int]

    class Config:
        from_attributes = True


class AdvanceCycleResponse(BaseModel):
    """Result of advancing the cycle by one day.

    ``completion`` is set only when the advance wrapped around.
    """
    next_day: int
    wrapped: bool
    cycles_completed: int
    completion: Optional[CycleCompletionResponse] = None


class CycleStatsResponse(BaseModel):
    cycle_number: int
    current_cycle_day: int
    cycle_days: int
    cycle_start_date: Optional[datetime.datetime]
    total_volume: float
    total_workouts_completed: int
    total_sets: int
    total_duration_seconds: int
    avg_mental_readiness: Optional[float]
    sets_by_muscle_group: dict[str, float]
    workouts_by_type: dict[str, int]


class CycleComparisonResponse(BaseModel):
    previous_cycle_number: int
    volume_delta_pct: float
    workouts_delta: int
    sets_delta: int
    mental_readiness_delta: Optional[float]


class NextWorkoutResponse(BaseModel):
    current_cycle_day: int
    cycle_days: int
    cycles_completed: int
    session: Optional[dict[str, Any]]
