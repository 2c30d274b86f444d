"""Cycle completion repository (insert-only)."""

from typing import Optional

from sqlmodel import Session, select

from app.models.cycle_completion import CycleCompletion


class CycleCompletionRepository:
    """Repository for CycleCompletion database operations."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, completion: CycleCompletion) -> CycleCompletion:
        """Stage *completion* in the current transaction without committing."""
        self.session.add(completion)
        self.session.flush()
        return completion

    def get_by_id(self, completion_id: int) -> Optional[CycleCompletion]:
        return self.session.get(CycleCompletion, completion_id)

    def get_last_by_user(self, user_id: int) -> Optional[CycleCompletion]:
        statement = (select(CycleCompletion)
                     .where(CycleCompletion.user_id == user_id)
                     .order_by(CycleCompletion.cycle_number.desc())
                     .limit(1))
        return self.session.exec(statement).first()

    def get_all_by_user(self, user_id: int) -> list[CycleCompletion]:
        statement = (select(CycleCompletion)
                     .where(CycleCompletion.user_id == user_id)
                     .order_by(CycleCompletion.cycle_number.desc()))
        return list(self.session.exec(statement).all())
