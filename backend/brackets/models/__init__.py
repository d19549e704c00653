from brackets.models.group import Group
from brackets.models.match import BracketType, Match, MatchStatus
from brackets.models.team import Team
from brackets.models.tournament import Tournament

__all__ = [
    "Tournament",
    "Group",
    "Team",
    "Match",
    "BracketType",
    "MatchStatus",
]
