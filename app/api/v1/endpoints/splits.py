"""
Split plan endpoints.

Activation, edits of the active plan and single-level undo.
"""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.api.dependencies import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.result import ActionResult
from app.schemas.split_plan import (ChangeVariationRequest, SplitModificationResponse, SplitPlanResponse,
                                    SwapDaysRequest, ToggleMuscleRequest, UndoResponse, )
from app.services.cycle_service import CycleService
from app.services.split_plan_service import SplitPlanService

router = APIRouter()


@router.get("/active", summary="Get the active split plan.", response_model=ActionResult[SplitPlanResponse], )
def get_active_plan(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(SplitPlanService(db).get_active_plan(user.id))


@router.post("/activate/{split_plan_id}", summary="Activate a split plan and restart at day 1.",
             response_model=ActionResult[SplitPlanResponse], )
def activate_plan(split_plan_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    return ActionResult.ok(CycleService(db).activate_split_plan(user.id, split_plan_id))


@router.post("/modifications/swap", summary="Swap the sessions of two cycle days.",
             response_model=ActionResult[SplitPlanResponse], )
def swap_days(data: SwapDaysRequest, db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    plan = SplitPlanService(db).swap_cycle_days(user.id, data.day1, data.day2, ai_validation=data.ai_validation,
                                                user_override=data.user_override, user_reason=data.user_reason)
    return ActionResult.ok(plan)


@router.post("/modifications/toggle-muscle", summary="Add or remove a muscle from a session.",
             response_model=ActionResult[SplitPlanResponse], )
def toggle_muscle(data: ToggleMuscleRequest, db: Session = Depends(get_db),
                  user: User = Depends(get_current_user), ):
    plan = SplitPlanService(db).toggle_muscle_in_session(user.id, data.cycle_day, data.muscle, data.add,
                                                         ai_validation=data.ai_validation,
                                                         user_override=data.user_override,
                                                         user_reason=data.user_reason)
    return ActionResult.ok(plan)


@router.post("/modifications/variation", summary="Change the variation of a session.",
             response_model=ActionResult[SplitPlanResponse], )
def change_variation(data: ChangeVariationRequest, db: Session = Depends(get_db),
                     user: User = Depends(get_current_user), ):
    plan = SplitPlanService(db).change_session_variation(user.id, data.cycle_day, data.variation,
                                                         ai_validation=data.ai_validation,
                                                         user_override=data.user_override,
                                                         user_reason=data.user_reason)
    return ActionResult.ok(plan)


@router.post("/modifications/undo", summary="Undo the last split modification.",
             response_model=ActionResult[UndoResponse], )
def undo_last(db: Session = Depends(get_db), user: User = Depends(get_current_user), ):
    result = SplitPlanService(db).undo_last_modification(user.id)
    if not result.restored:
        return ActionResult.fail("nothing_to_undo", "Nothing to undo")
    return ActionResult.ok(result)


@router.get("/modifications", summary="Recent split modifications, newest first.",
            response_model=ActionResult[list[SplitModificationResponse]], )
def recent_modifications(limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db),
                         user: User = Depends(get_current_user), ):
    return ActionResult.ok(SplitPlanService(db).get_recent_modifications(user.id, limit))
