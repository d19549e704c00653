from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session

from brackets.database import get_session
from brackets.models.group import Group
from brackets.models.match import BracketType, MatchStatus
from brackets.services.match_store import SqlMatchStore

router = APIRouter()


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tournament_id: str
    group_id: str
    bracket: BracketType
    round_number: int
    match_number_in_round: int
    status: MatchStatus
    next_match_winner_id: Optional[str] = None
    next_match_loser_id: Optional[str] = None
    is_grand_final: bool
    is_bracket_reset: bool


@router.get("/tournaments/{tournament_id}/groups/{group_id}/matches", response_model=List[MatchResponse])
def list_group_matches(tournament_id: str, group_id: str, session: Session = Depends(get_session)):
    """
    Get the bracket of a group.

    Returns an empty list while the roster is incomplete. Order: winners bracket,
    losers bracket, grand final; each by round then position.
    """
    group = session.get(Group, group_id)
    if not group or group.tournament_id != tournament_id:
        raise HTTPException(status_code=404, detail="Group not found")
    return SqlMatchStore(session).find_by_tournament_and_group(tournament_id, group_id)


@router.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(match_id: str, session: Session = Depends(get_session)):
    """Get a single match by its bracket id"""
    match = SqlMatchStore(session).get(match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")
    return match
