"""
Workout repository.

Lookups used by cycle statistics and by split-plan workout sync.
"""

import datetime
from typing import Iterable, Optional

from sqlmodel import Session, select

from app.models.workout import Workout, WorkoutStatus


class WorkoutRepository:
    """Repository for Workout database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, workout_id: int) -> Optional[Workout]:
        return self.session.get(Workout, workout_id)

    def get_completed_for_cycle(self, user_id: int, split_plan_id: int,
                                since: Optional[datetime.datetime]) -> list[Workout]:
        """Completed workouts of *split_plan_id*, optionally since *since*."""
        statement = select(Workout).where(
            Workout.user_id == user_id,
            Workout.split_plan_id == split_plan_id,
            Workout.status == WorkoutStatus.COMPLETED,
        )
        if since is not None:
            statement = statement.where(Workout.completed_at >= since)
        statement = statement.order_by(Workout.completed_at)
        return list(self.session.exec(statement).all())

    def get_by_plan_and_days(self, split_plan_id: int, cycle_days: Iterable[int]) -> list[Workout]:
        statement = (select(Workout)
                     .where(Workout.split_plan_id == split_plan_id, Workout.cycle_day.in_(list(cycle_days)))
                     .order_by(Workout.id))
        return list(self.session.exec(statement).all())

    def create(self, workout: Workout) -> Workout:
        self.session.add(workout)
        self.session.commit()
        self.session.refresh(workout)
        return workout

    def add(self, workout: Workout) -> Workout:
        """Stage *workout* in the current transaction without committing."""
        self.session.add(workout)
        self.session.flush()
        return workout
