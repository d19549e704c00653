from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Index, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from brackets.models.group import Group
    from brackets.models.tournament import Tournament


class BracketType(str, Enum):
    WINNERS = "WINNERS"
    LOSERS = "LOSERS"


class MatchStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"


class Match(SQLModel, table=True):
    __table_args__ = (Index("ix_match_tournament_group", "tournament_id", "group_id"),)

    # Deterministic: "{tournament_id}_{W|L}R{round}M{match}". The primary key doubles as
    # the uniqueness guard against a second bracket for the same tournament.
    id: str = Field(primary_key=True)
    tournament_id: str = Field(foreign_key="tournament.id")
    group_id: str = Field(foreign_key="tournament_group.id")
    bracket: BracketType = Field(sa_column=Column(String, nullable=False))
    round_number: int
    match_number_in_round: int  # 0-based
    status: MatchStatus = Field(default=MatchStatus.PENDING, sa_column=Column(String, nullable=False))

    # Advancement edges (match ids, not foreign keys: the whole set is inserted at once)
    next_match_winner_id: Optional[str] = Field(default=None)
    next_match_loser_id: Optional[str] = Field(default=None)

    # Grand final and bracket reset live in the winners bracket (rounds 6 and 7)
    is_grand_final: bool = Field(default=False)
    is_bracket_reset: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="matches")
    group: "Group" = Relationship(back_populates="matches")
