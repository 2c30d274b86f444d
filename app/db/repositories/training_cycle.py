"""Training cycle repository."""

from typing import Optional

from sqlmodel import Session, select

from app.models.training_cycle import TrainingCycle


class TrainingCycleRepository:
    """Repository for TrainingCycle database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_user(self, user_id: int) -> Optional[TrainingCycle]:
        statement = select(TrainingCycle).where(TrainingCycle.user_id == user_id)
        return self.session.exec(statement).first()

    def get_by_user_for_update(self, user_id: int) -> Optional[TrainingCycle]:
        """Read the user's cycle row holding a row lock until commit.

        Serializes concurrent advances for the same user.  Backends
        without ``FOR UPDATE`` (SQLite) ignore the lock clause.
        """
        statement = (select(TrainingCycle)
                     .where(TrainingCycle.user_id == user_id)
                     .with_for_update())
        return self.session.exec(statement).first()

    def add(self, cycle: TrainingCycle) -> TrainingCycle:
        """Stage *cycle* in the current transaction without committing."""
        self.session.add(cycle)
        self.session.flush()
        return cycle
