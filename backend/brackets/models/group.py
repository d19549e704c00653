from datetime import datetime
from typing import TYPE_CHECKING, List
from uuid import uuid4

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from brackets.models.match import Match
    from brackets.models.team import Team
    from brackets.models.tournament import Tournament


class Group(SQLModel, table=True):
    # "group" is a reserved word in SQL
    __tablename__ = "tournament_group"
    __table_args__ = (SAUniqueConstraint("tournament_id", "name", name="uq_tournament_group_name"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    tournament_id: str = Field(foreign_key="tournament.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="groups")
    teams: List["Team"] = Relationship(back_populates="group")
    matches: List["Match"] = Relationship(back_populates="group")

    @property
    def team_count(self) -> int:
        return len(self.teams)
