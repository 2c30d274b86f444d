"""
Split plan modification service.

Every edit of the active split plan (swap two days, add or remove a
muscle from a session, switch a session's variation) runs as one
transaction that

1. snapshots the plan's ``sessions`` / ``frequency_map`` /
   ``volume_distribution`` and the ``{id, cycle_day, status}`` of every
   workout the edit touches,
2. applies the edit and re-syncs the touched workouts,
3. appends a :class:`SplitModification` holding the snapshot.

Undo pops the most recent entry: plan first, then workouts, then the
log row is deleted, all in one transaction.  Undoing a
``change_split_type`` entry, written when another plan is activated,
reactivates the replaced plan and restores the cycle position.  Each
call pops one entry; once the log is empty undo reports nothing to do.
"""

import copy
import datetime
import logging
from typing import Any, Callable, Optional

from sqlmodel import Session

from app.core.exceptions import PreconditionError, ValidationError
from app.db.repositories.split_modification import SplitModificationRepository
from app.db.repositories.split_plan import SplitPlanRepository
from app.db.repositories.training_cycle import TrainingCycleRepository
from app.db.repositories.workout import WorkoutRepository
from app.models.split_modification import ModificationType, SplitModification
from app.models.split_plan import SplitPlan
from app.models.workout import Workout, WorkoutStatus
from app.scheduling import split_edits
from app.schemas.split_plan import SplitModificationResponse, SplitPlanResponse, UndoResponse

logger = logging.getLogger(__name__)


class SplitPlanService:
    """Service for split plan edits and single-level undo."""

    def __init__(self, session: Session):
        self.session = session
        self.split_plan_repo = SplitPlanRepository(session)
        self.workout_repo = WorkoutRepository(session)
        self.modification_repo = SplitModificationRepository(session)
        self.cycle_repo = TrainingCycleRepository(session)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def get_active_plan(self, user_id: int) -> SplitPlanResponse:
        return SplitPlanResponse.model_validate(self._get_active_plan(user_id))

    def swap_cycle_days(self, user_id: int, day1: int, day2: int, ai_validation: Optional[dict] = None,
                        user_override: bool = False, user_reason: Optional[str] = None) -> SplitPlanResponse:
        """Exchange the sessions of two cycle days.

        Non-completed workouts planned on either day follow their session.
        """
        plan = self._get_active_plan(user_id)
        self._check_day(plan, day1)
        self._check_day(plan, day2)
        try:
            sessions = split_edits.swap_sessions(plan.sessions or [], day1, day2)
        except ValueError as exc:
            raise ValidationError(str(exc), code="invalid_split_edit") from exc

        def sync(workout: Workout) -> None:
            workout.cycle_day = day2 if workout.cycle_day == day1 else day1

        return self._apply(user_id, plan, ModificationType.SWAP_DAYS, details={ "day1": day1, "day2": day2 },
                           sessions=sessions, frequency_map=plan.frequency_map,
                           volume_distribution=plan.volume_distribution,
                           workouts=self._open_workouts(plan, [day1, day2]), sync=sync,
                           ai_validation=ai_validation, user_override=user_override, user_reason=user_reason)

    def toggle_muscle_in_session(self, user_id: int, cycle_day: int, muscle: str, add: bool,
                                 ai_validation: Optional[dict] = None, user_override: bool = False,
                                 user_reason: Optional[str] = None) -> SplitPlanResponse:
        """Add *muscle* to, or remove it from, the session on *cycle_day*."""
        plan = self._get_active_plan(user_id)
        self._check_day(plan, cycle_day)
        try:
            sessions, frequency_map, volume_distribution = split_edits.toggle_muscle_focus(
                plan.sessions or [], plan.frequency_map or {}, plan.volume_distribution or {}, cycle_day, muscle,
                add)
        except ValueError as exc:
            raise ValidationError(str(exc), code="invalid_split_edit") from exc

        return self._apply(user_id, plan, ModificationType.TOGGLE_MUSCLE,
                           details={ "cycle_day": cycle_day, "muscle": muscle, "add": add }, sessions=sessions,
                           frequency_map=frequency_map, volume_distribution=volume_distribution,
                           workouts=self._open_workouts(plan, [cycle_day]), sync=_regenerate,
                           ai_validation=ai_validation, user_override=user_override, user_reason=user_reason)

    def change_session_variation(self, user_id: int, cycle_day: int, variation: str,
                                 ai_validation: Optional[dict] = None, user_override: bool = False,
                                 user_reason: Optional[str] = None) -> SplitPlanResponse:
        plan = self._get_active_plan(user_id)
        self._check_day(plan, cycle_day)
        try:
            sessions = split_edits.change_session_variation(plan.sessions or [], cycle_day, variation)
        except ValueError as exc:
            raise ValidationError(str(exc), code="invalid_split_edit") from exc

        return self._apply(user_id, plan, ModificationType.CHANGE_VARIATION,
                           details={ "cycle_day": cycle_day, "variation": variation }, sessions=sessions,
                           frequency_map=plan.frequency_map, volume_distribution=plan.volume_distribution,
                           workouts=self._open_workouts(plan, [cycle_day]), sync=_regenerate,
                           ai_validation=ai_validation, user_override=user_override, user_reason=user_reason)

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def undo_last_modification(self, user_id: int) -> UndoResponse:
        """Revert the most recent split modification of the user.

        Returns ``restored=False`` when there is nothing to undo.
        """
        modification = self.modification_repo.get_latest_by_user(user_id)
        if modification is None:
            logger.info("Nothing to undo for user %s", user_id)
            return UndoResponse(restored=False)
        if modification.modification_type == ModificationType.CHANGE_SPLIT_TYPE:
            return self._undo_split_type_change(user_id, modification)

        plan = self.split_plan_repo.get_by_id(modification.split_plan_id)
        if plan is None:
            raise PreconditionError("Split plan not found", code="split_plan_not_found")

        state = modification.previous_state or {}
        modification_type = modification.modification_type
        workouts_restored = 0
        try:
            plan.sessions = copy.deepcopy(state.get("sessions", plan.sessions))
            plan.frequency_map = copy.deepcopy(state.get("frequency_map", plan.frequency_map))
            plan.volume_distribution = copy.deepcopy(state.get("volume_distribution", plan.volume_distribution))
            plan.updated_at = datetime.datetime.utcnow()
            self.split_plan_repo.add(plan)

            for snapshot in state.get("workouts", []):
                workout = self.workout_repo.get_by_id(snapshot["id"])
                if workout is None:
                    continue
                workout.cycle_day = snapshot["cycle_day"]
                workout.status = snapshot["status"]
                workout.updated_at = datetime.datetime.utcnow()
                self.workout_repo.add(workout)
                workouts_restored += 1

            self.modification_repo.delete(modification)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("Undid %s for user %s (%s workouts restored)", modification_type, user_id, workouts_restored)
        return UndoResponse(restored=True, modification_type=modification_type,
                            workouts_restored=workouts_restored)

    def _undo_split_type_change(self, user_id: int, modification: SplitModification) -> UndoResponse:
        """Reactivate the replaced plan and put the cycle back where it was."""
        state = modification.previous_state or {}
        plan_id = state.get("active_split_plan_id")
        previous = self.split_plan_repo.get_by_id(plan_id) if plan_id is not None else None
        if previous is None or previous.user_id != user_id:
            raise PreconditionError("Split plan not found", code="split_plan_not_found")

        now = datetime.datetime.utcnow()
        start = state.get("current_cycle_start_date")
        try:
            for plan in self.split_plan_repo.get_all_by_user(user_id):
                plan.active = plan.id == previous.id
                plan.updated_at = now
                self.split_plan_repo.add(plan)

            cycle = self.cycle_repo.get_by_user_for_update(user_id)
            if cycle is not None:
                cycle.active_split_plan_id = previous.id
                cycle.current_cycle_day = state.get("current_cycle_day", 1)
                cycle.current_cycle_start_date = datetime.datetime.fromisoformat(start) if start else None
                cycle.updated_at = now
                self.cycle_repo.add(cycle)

            self.modification_repo.delete(modification)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info("Undid split change for user %s, plan %s active again", user_id, previous.id)
        return UndoResponse(restored=True, modification_type=ModificationType.CHANGE_SPLIT_TYPE, workouts_restored=0)

    def get_recent_modifications(self, user_id: int, limit: int = 20) -> list[SplitModificationResponse]:
        entries = self.modification_repo.get_recent_by_user(user_id, limit)
        return [SplitModificationResponse.model_validate(m) for m in entries]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_active_plan(self, user_id: int) -> SplitPlan:
        plan = self.split_plan_repo.get_active_by_user(user_id)
        if not plan:
            raise PreconditionError("No active split plan", code="no_active_split")
        return plan

    @staticmethod
    def _check_day(plan: SplitPlan, cycle_day: int) -> None:
        if not 1 <= cycle_day <= plan.cycle_days:
            raise ValidationError(f"Cycle day {cycle_day} is outside 1..{plan.cycle_days}", code="invalid_cycle_day")

    def _open_workouts(self, plan: SplitPlan, cycle_days: list[int]) -> list[Workout]:
        workouts = self.workout_repo.get_by_plan_and_days(plan.id, cycle_days)
        return [w for w in workouts if w.status != WorkoutStatus.COMPLETED]

    def _apply(self, user_id: int, plan: SplitPlan, modification_type: str, details: dict[str, Any],
               sessions: list, frequency_map: dict, volume_distribution: dict, workouts: list[Workout],
               sync: Callable[[Workout], None], ai_validation: Optional[dict], user_override: bool,
               user_reason: Optional[str]) -> SplitPlanResponse:
        now = datetime.datetime.utcnow()
        previous_state = {
            "sessions": copy.deepcopy(plan.sessions),
            "frequency_map": copy.deepcopy(plan.frequency_map),
            "volume_distribution": copy.deepcopy(plan.volume_distribution),
            "workouts": [{ "id": w.id, "cycle_day": w.cycle_day, "status": w.status } for w in workouts],
        }
        try:
            plan.sessions = sessions
            plan.frequency_map = copy.deepcopy(frequency_map)
            plan.volume_distribution = copy.deepcopy(volume_distribution)
            plan.updated_at = now
            self.split_plan_repo.add(plan)

            for workout in workouts:
                sync(workout)
                workout.updated_at = now
                self.workout_repo.add(workout)

            self.modification_repo.add(SplitModification(user_id=user_id, split_plan_id=plan.id,
                                                          modification_type=modification_type, details=details,
                                                          previous_state=previous_state,
                                                          ai_validation=ai_validation or {},
                                                          user_override=user_override, user_reason=user_reason,
                                                          created_at=now, ))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(plan)
        logger.info("User %s applied %s to split plan %s (%s workouts synced)", user_id, modification_type,
                    plan.id, len(workouts))
        return SplitPlanResponse.model_validate(plan)


def _regenerate(workout: Workout) -> None:
    workout.status = WorkoutStatus.DRAFT
