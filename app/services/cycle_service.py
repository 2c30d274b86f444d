"""
Cycle progression service.

Moves a user through the days of their active split plan.

**Advance**::

    next_day = 1 if current_day >= cycle_days else current_day + 1

A plain advance is a single-row update.  A wraparound (leaving the last
day) is one transaction that

1. aggregates the completed workouts of the finished cycle,
2. inserts a :class:`CycleCompletion` numbered ``cycles_completed + 1``,
3. resets the day to 1 and increments ``cycles_completed``.

If any step fails nothing is written: the day is never advanced without
its completion record.  The cycle row is read ``FOR UPDATE`` so two
concurrent advances for the same user are serialized, and the unique
``(user_id, cycle_number)`` constraint rejects a duplicate completion.
"""

import datetime
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from app.core.exceptions import ConflictError, CycleStatsError, NotFoundError, PreconditionError
from app.db.repositories.cycle_completion import CycleCompletionRepository
from app.db.repositories.split_modification import SplitModificationRepository
from app.db.repositories.split_plan import SplitPlanRepository
from app.db.repositories.training_cycle import TrainingCycleRepository
from app.db.repositories.workout import WorkoutRepository
from app.models.cycle_completion import CycleCompletion
from app.models.split_modification import ModificationType, SplitModification
from app.models.split_plan import SplitPlan
from app.models.training_cycle import TrainingCycle
from app.scheduling.cycle import CycleStats, compare_cycles, compute_cycle_stats, next_cycle_position
from app.scheduling.split_edits import session_for_day
from app.schemas.cycle import (AdvanceCycleResponse, CycleComparisonResponse, CycleCompletionResponse,
                               CycleStatsResponse, NextWorkoutResponse, )
from app.schemas.split_plan import SplitPlanResponse

logger = logging.getLogger(__name__)


class CycleService:
    """Service for split cycle progression and cycle statistics."""

    def __init__(self, session: Session):
        self.session = session
        self.cycle_repo = TrainingCycleRepository(session)
        self.split_plan_repo = SplitPlanRepository(session)
        self.workout_repo = WorkoutRepository(session)
        self.completion_repo = CycleCompletionRepository(session)
        self.modification_repo = SplitModificationRepository(session)

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def advance_cycle(self, user_id: int, now: Optional[datetime.datetime] = None) -> AdvanceCycleResponse:
        """Advance the user's cycle by one day.

        Raises:
            PreconditionError: No active split plan, or the plan is gone.
            CycleStatsError: Statistics for a finished cycle could not be
                computed; nothing was written.
            ConflictError: A concurrent advance already recorded this cycle.
        """
        now = now or datetime.datetime.utcnow()
        try:
            cycle, plan = self._load_cycle_and_plan(user_id, for_update=True)
            from_day = cycle.current_cycle_day
            position = next_cycle_position(from_day, plan.cycle_days)

            completion = None
            if position.wrapped:
                completion = self._record_completion(cycle, plan, now)
                cycle.cycles_completed += 1
                cycle.current_cycle_start_date = now
                cycle.last_cycle_completed_at = now

            cycle.current_cycle_day = position.next_day
            cycle.updated_at = now
            self.cycle_repo.add(cycle)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Concurrent wraparound rejected for user %s", user_id)
            raise ConflictError("Cycle completion already recorded", code="cycle_already_completed") from exc
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(cycle)
        logger.info("Advanced cycle for user %s: day %s -> %s (wrapped=%s)", user_id, from_day,
                    position.next_day, position.wrapped)

        completion_response = None
        if completion is not None:
            self.session.refresh(completion)
            completion_response = CycleCompletionResponse.model_validate(completion)
            logger.info("User %s completed cycle %s (%s workouts)", user_id, completion.cycle_number,
                        completion.total_workouts_completed)

        return AdvanceCycleResponse(next_day=cycle.current_cycle_day, wrapped=position.wrapped,
                                    cycles_completed=cycle.cycles_completed, completion=completion_response, )

    def activate_split_plan(self, user_id: int, split_plan_id: int,
                            now: Optional[datetime.datetime] = None) -> SplitPlanResponse:
        """Make *split_plan_id* the active plan and restart at day 1.

        Replacing a different active plan appends a ``change_split_type``
        modification holding the replaced plan and cycle position, so the
        switch can be undone like any other split edit.
        """
        now = now or datetime.datetime.utcnow()
        plan = self.split_plan_repo.get_by_id(split_plan_id)
        if not plan or plan.user_id != user_id:
            raise NotFoundError("Split plan")

        try:
            cycle = self.cycle_repo.get_by_user_for_update(user_id) or TrainingCycle(user_id=user_id)
            replaced = self.split_plan_repo.get_active_by_user(user_id)
            if replaced and replaced.id != plan.id:
                start = cycle.current_cycle_start_date
                self.modification_repo.add(SplitModification(
                    user_id=user_id, split_plan_id=plan.id, modification_type=ModificationType.CHANGE_SPLIT_TYPE,
                    details={ "from_plan_id": replaced.id, "to_plan_id": plan.id,
                              "from_split_type": replaced.split_type, "to_split_type": plan.split_type },
                    previous_state={ "active_split_plan_id": replaced.id,
                                     "current_cycle_day": cycle.current_cycle_day or 1,
                                     "current_cycle_start_date": start.isoformat() if start else None },
                    created_at=now, ))

            for other in self.split_plan_repo.get_all_by_user(user_id):
                other.active = other.id == plan.id
                other.updated_at = now
                self.split_plan_repo.add(other)

            cycle.active_split_plan_id = plan.id
            cycle.current_cycle_day = 1
            cycle.current_cycle_start_date = now
            cycle.updated_at = now
            self.cycle_repo.add(cycle)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(plan)
        logger.info("User %s activated split plan %s (%s days)", user_id, plan.id, plan.cycle_days)
        return SplitPlanResponse.model_validate(plan)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_current_cycle_stats(self, user_id: int) -> CycleStatsResponse:
        cycle, plan = self._load_cycle_and_plan(user_id)
        stats = self._compute_stats(cycle, plan)
        return CycleStatsResponse(cycle_number=cycle.cycles_completed + 1, current_cycle_day=cycle.current_cycle_day,
                                  cycle_days=plan.cycle_days, cycle_start_date=cycle.current_cycle_start_date,
                                  total_volume=stats.total_volume,
                                  total_workouts_completed=stats.total_workouts_completed,
                                  total_sets=stats.total_sets, total_duration_seconds=stats.total_duration_seconds,
                                  avg_mental_readiness=stats.avg_mental_readiness,
                                  sets_by_muscle_group=stats.sets_by_muscle_group,
                                  workouts_by_type=stats.workouts_by_type, )

    def get_comparison_with_previous(self, user_id: int) -> Optional[CycleComparisonResponse]:
        """Compare the in-progress cycle with the last completed one.

        Returns ``None`` before the first completed cycle.
        """
        previous = self.completion_repo.get_last_by_user(user_id)
        if previous is None:
            return None
        cycle, plan = self._load_cycle_and_plan(user_id)
        comparison = compare_cycles(self._compute_stats(cycle, plan), previous)
        return CycleComparisonResponse(previous_cycle_number=previous.cycle_number,
                                       volume_delta_pct=comparison.volume_delta_pct,
                                       workouts_delta=comparison.workouts_delta, sets_delta=comparison.sets_delta,
                                       mental_readiness_delta=comparison.mental_readiness_delta, )

    def get_cycle_completions(self, user_id: int) -> list[CycleCompletionResponse]:
        return [CycleCompletionResponse.model_validate(c) for c in self.completion_repo.get_all_by_user(user_id)]

    def get_last_cycle_completion(self, user_id: int) -> Optional[CycleCompletionResponse]:
        completion = self.completion_repo.get_last_by_user(user_id)
        return CycleCompletionResponse.model_validate(completion) if completion else None

    def get_next_workout_preview(self, user_id: int) -> NextWorkoutResponse:
        cycle, plan = self._load_cycle_and_plan(user_id)
        return NextWorkoutResponse(current_cycle_day=cycle.current_cycle_day, cycle_days=plan.cycle_days,
                                   cycles_completed=cycle.cycles_completed,
                                   session=session_for_day(plan.sessions or [], cycle.current_cycle_day), )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_cycle_and_plan(self, user_id: int, for_update: bool = False) -> tuple[TrainingCycle, SplitPlan]:
        if for_update:
            cycle = self.cycle_repo.get_by_user_for_update(user_id)
        else:
            cycle = self.cycle_repo.get_by_user(user_id)
        if not cycle or cycle.active_split_plan_id is None:
            raise PreconditionError("No active split plan", code="no_active_split")

        plan = self.split_plan_repo.get_by_id(cycle.active_split_plan_id)
        if not plan:
            raise PreconditionError("Split plan not found", code="split_plan_not_found")
        return cycle, plan

    def _compute_stats(self, cycle: TrainingCycle, plan: SplitPlan) -> CycleStats:
        try:
            workouts = self.workout_repo.get_completed_for_cycle(cycle.user_id, plan.id,
                                                                 cycle.current_cycle_start_date)
            return compute_cycle_stats(workouts)
        except (SQLAlchemyError, TypeError, ValueError, KeyError, AttributeError) as exc:
            logger.exception("Cycle statistics failed for user %s", cycle.user_id)
            raise CycleStatsError(details={ "reason": str(exc) }) from exc

    def _record_completion(self, cycle: TrainingCycle, plan: SplitPlan,
                           now: datetime.datetime) -> CycleCompletion:
        stats = self._compute_stats(cycle, plan)
        completion = CycleCompletion(user_id=cycle.user_id, split_plan_id=plan.id,
                                     cycle_number=cycle.cycles_completed + 1, completed_at=now,
                                     total_volume=stats.total_volume,
                                     total_workouts_completed=stats.total_workouts_completed,
                                     total_sets=stats.total_sets, total_duration_seconds=stats.total_duration_seconds,
                                     avg_mental_readiness=stats.avg_mental_readiness,
                                     sets_by_muscle_group=stats.sets_by_muscle_group,
                                     workouts_by_type=stats.workouts_by_type, )
        return self.completion_repo.add(completion)
