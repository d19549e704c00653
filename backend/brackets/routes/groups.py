"""
Group and roster API routes.

Adding a team is the roster change that drives bracket creation: once the team is
committed, the route delivers a RosterChangedEvent to the RosterWatcher and reports
what it did alongside the new team.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from brackets.database import get_session
from brackets.errors import CollaboratorFailure
from brackets.models.group import Group
from brackets.models.team import Team
from brackets.models.tournament import Tournament
from brackets.services.bracket_generator import BRACKET_SIZE
from brackets.services.group_lookup import SqlGroupLookup
from brackets.services.match_store import SqlMatchStore
from brackets.services.roster_watcher import RosterChangedEvent, RosterWatcher

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class GroupCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class TeamCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    group_id: str
    name: str
    created_at: datetime


class GroupResponse(BaseModel):
    id: str
    tournament_id: str
    name: str
    team_count: int
    teams: List[TeamResponse]
    created_at: datetime


class TeamAddResponse(BaseModel):
    team: TeamResponse
    bracket: Dict[str, Any]


def _group_response(group: Group) -> GroupResponse:
    teams = sorted(group.teams, key=lambda t: (t.created_at, t.id))
    return GroupResponse(
        id=group.id,
        tournament_id=group.tournament_id,
        name=group.name,
        team_count=group.team_count,
        teams=[TeamResponse.model_validate(t) for t in teams],
        created_at=group.created_at,
    )


def _require_tournament(session: Session, tournament_id: str) -> Tournament:
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


def _require_group(session: Session, tournament_id: str, group_id: str) -> Group:
    _require_tournament(session, tournament_id)
    group = SqlGroupLookup(session).find_group(tournament_id, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


# ============================================================================
# Group Endpoints
# ============================================================================


@router.post("/tournaments/{tournament_id}/groups", response_model=GroupResponse, status_code=201)
def create_group(tournament_id: str, request: GroupCreate, session: Session = Depends(get_session)):
    """
    Create the group of a tournament.

    A tournament holds one group: match ids are scoped by tournament, so a second
    bracket in the same tournament would reuse the first one's ids.
    """
    _require_tournament(session, tournament_id)
    existing = session.exec(select(Group).where(Group.tournament_id == tournament_id)).first()
    if existing:
        raise HTTPException(status_code=409, detail="Tournament already has a group")

    group = Group(tournament_id=tournament_id, name=request.name)
    try:
        session.add(group)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail=f"Group with name '{request.name}' already exists")

    session.refresh(group)
    return _group_response(group)


@router.get("/tournaments/{tournament_id}/groups", response_model=List[GroupResponse])
def list_groups(tournament_id: str, session: Session = Depends(get_session)):
    """List groups of a tournament"""
    _require_tournament(session, tournament_id)
    groups = session.exec(
        select(Group).where(Group.tournament_id == tournament_id).order_by(Group.created_at, Group.id)
    ).all()
    return [_group_response(g) for g in groups]


@router.get("/tournaments/{tournament_id}/groups/{group_id}", response_model=GroupResponse)
def get_group(tournament_id: str, group_id: str, session: Session = Depends(get_session)):
    """Get a group with its roster"""
    return _group_response(_require_group(session, tournament_id, group_id))


# ============================================================================
# Roster Endpoints
# ============================================================================


@router.post(
    "/tournaments/{tournament_id}/groups/{group_id}/teams",
    response_model=TeamAddResponse,
    status_code=201,
)
def add_team(tournament_id: str, group_id: str, request: TeamCreate, session: Session = Depends(get_session)):
    """
    Add a team to a group, then let the roster watcher create the bracket if the group is full.

    Constraints:
    - a group holds at most 32 teams
    - (group_id, name) must be unique
    """
    group = _require_group(session, tournament_id, group_id)
    if group.team_count >= BRACKET_SIZE:
        raise HTTPException(status_code=409, detail=f"Group already has {BRACKET_SIZE} teams")

    team = Team(group_id=group.id, name=request.name)
    try:
        session.add(team)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=409, detail=f"Team with name '{request.name}' already exists in this group"
        )
    session.refresh(team)
    session.refresh(group)
    logger.info("Team %s added to group %s (%d/%d)", team.id, group.id, group.team_count, BRACKET_SIZE)

    watcher = RosterWatcher(SqlGroupLookup(session), SqlMatchStore(session))
    try:
        result = watcher.handle(RosterChangedEvent(tournament_id=tournament_id, group_id=group_id))
    except CollaboratorFailure as e:
        raise HTTPException(status_code=500, detail=f"Bracket creation failed: {e}")

    return TeamAddResponse(team=TeamResponse.model_validate(team), bracket=result.to_dict())
