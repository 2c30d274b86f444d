"""
Coach / client relationship model.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class CoachClientRelationship(SQLModel, table=True):
    __tablename__ = "coach_client_relationships"
    __table_args__ = (UniqueConstraint("coach_id", "client_id", name="uq_coach_client"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    coach_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    client_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    status: str = Field(default="active", max_length=20)

    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
