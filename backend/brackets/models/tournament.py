from datetime import datetime
from typing import TYPE_CHECKING, List
from uuid import uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from brackets.models.group import Group
    from brackets.models.match import Match


class Tournament(SQLModel, table=True):
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    groups: List["Group"] = Relationship(back_populates="tournament")
    matches: List["Match"] = Relationship(back_populates="tournament")
