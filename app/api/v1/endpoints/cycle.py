"""
Cycle endpoints.

Advance the current user's split cycle and read cycle statistics.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.cycle import (AdvanceCycleResponse, CycleComparisonResponse, CycleCompletionResponse,
                               CycleStatsResponse, NextWorkoutResponse, )
from app.schemas.result import ActionResult
from app.services.cycle_service import CycleService

router = APIRouter()


@router.post("/advance", summary="Advance the cycle by one day.", response_model=ActionResult[AdvanceCycleResponse], )
def advance_cycle(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    result = CycleService(db).advance_cycle(user.id)
    warnings = [f"Cycle {result.completion.cycle_number} completed"] if result.completion else []
    return ActionResult.ok(result, warnings)


@router.get("/stats", summary="Statistics of the in-progress cycle.", response_model=ActionResult[CycleStatsResponse], )
def get_stats(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(CycleService(db).get_current_cycle_stats(user.id))


@router.get("/stats/comparison", summary="Compare the in-progress cycle with the previous one.",
            response_model=ActionResult[Optional[CycleComparisonResponse]], )
def get_comparison(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(CycleService(db).get_comparison_with_previous(user.id))


@router.get("/completions", summary="All completed cycles, newest first.",
            response_model=ActionResult[list[CycleCompletionResponse]], )
def get_completions(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(CycleService(db).get_cycle_completions(user.id))


@router.get("/completions/last", summary="Last completed cycle.",
            response_model=ActionResult[Optional[CycleCompletionResponse]], )
def get_last_completion(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(CycleService(db).get_last_cycle_completion(user.id))


@router.get("/next", summary="Session planned for the current cycle day.",
            response_model=ActionResult[NextWorkoutResponse], )
def get_next_workout(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(CycleService(db).get_next_workout_preview(user.id))
