"""Split plan repository."""

from typing import Optional

from sqlmodel import Session, select

from app.models.split_plan import SplitPlan


class SplitPlanRepository:
    """Repository for SplitPlan database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, plan_id: int) -> Optional[SplitPlan]:
        return self.session.get(SplitPlan, plan_id)

    def get_active_by_user(self, user_id: int) -> Optional[SplitPlan]:
        statement = select(SplitPlan).where(SplitPlan.user_id == user_id, SplitPlan.active == True)  # noqa: E712
        return self.session.exec(statement).first()

    def get_all_by_user(self, user_id: int) -> list[SplitPlan]:
        statement = (select(SplitPlan)
                     .where(SplitPlan.user_id == user_id)
                     .order_by(SplitPlan.created_at.desc()))
        return list(self.session.exec(statement).all())

    def create(self, plan: SplitPlan) -> SplitPlan:
        self.session.add(plan)
        self.session.commit()
        self.session.refresh(plan)
        return plan

    def add(self, plan: SplitPlan) -> SplitPlan:
        """Stage *plan* in the current transaction without committing."""
        self.session.add(plan)
        self.session.flush()
        return plan
