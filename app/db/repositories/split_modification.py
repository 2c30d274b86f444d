"""Split modification log repository."""

from typing import Optional

from sqlmodel import Session, select

from app.models.split_modification import SplitModification


class SplitModificationRepository:
    """Repository for SplitModification database operations."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, modification: SplitModification) -> SplitModification:
        """Stage *modification* in the current transaction without committing."""
        self.session.add(modification)
        self.session.flush()
        return modification

    def get_latest_by_user(self, user_id: int) -> Optional[SplitModification]:
        """Most recent entry; ``id`` breaks ties between equal timestamps."""
        statement = (select(SplitModification)
                     .where(SplitModification.user_id == user_id)
                     .order_by(SplitModification.created_at.desc(), SplitModification.id.desc())
                     .limit(1))
        return self.session.exec(statement).first()

    def get_recent_by_user(self, user_id: int, limit: int = 20) -> list[SplitModification]:
        statement = (select(SplitModification)
                     .where(SplitModification.user_id == user_id)
                     .order_by(SplitModification.created_at.desc(), SplitModification.id.desc())
                     .limit(limit))
        return list(self.session.exec(statement).all())

    def delete(self, modification: SplitModification) -> None:
        """Stage deletion of *modification* without committing."""
        self.session.delete(modification)
        self.session.flush()
