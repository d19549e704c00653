from datetime import datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from brackets.models.group import Group


class Team(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("group_id", "name", name="uq_group_team_name"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    group_id: str = Field(foreign_key="tournament_group.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    group: "Group" = Relationship(back_populates="teams")
