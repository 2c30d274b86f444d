"""Coach block repository."""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.coach_block import CoachBlock


class CoachBlockRepository:
    """Repository for CoachBlock database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, block_id: int) -> Optional[CoachBlock]:
        return self.session.get(CoachBlock, block_id)

    def get_overlapping(self, coach_id: int, start: datetime.date, end: datetime.date) -> list[CoachBlock]:
        """Blocks whose date window intersects ``start..end``."""
        statement = (select(CoachBlock)
                     .where(CoachBlock.coach_id == coach_id, CoachBlock.start_date <= end,
                            CoachBlock.end_date >= start)
                     .order_by(CoachBlock.start_date))
        return list(self.session.exec(statement).all())

    def create(self, block: CoachBlock) -> CoachBlock:
        self.session.add(block)
        self.session.commit()
        self.session.refresh(block)
        return block

    def delete(self, block_id: int) -> bool:
        block = self.get_by_id(block_id)
        if block:
            self.session.delete(block)
            self.session.commit()
            return True
        return False
