"""Coach / client relationship repository."""

from typing import Optional

from sqlmodel import Session, select

from app.models.coach_client import CoachClientRelationship


class CoachClientRepository:
    """Repository for CoachClientRelationship database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_active(self, coach_id: int, client_id: int) -> Optional[CoachClientRelationship]:
        statement = select(CoachClientRelationship).where(
            CoachClientRelationship.coach_id == coach_id,
            CoachClientRelationship.client_id == client_id,
            CoachClientRelationship.status == "active",
        )
        return self.session.exec(statement).first()

    def create(self, relationship: CoachClientRelationship) -> CoachClientRelationship:
        self.session.add(relationship)
        self.session.commit()
        self.session.refresh(relationship)
        return relationship
