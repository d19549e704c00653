import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy import delete
from sqlmodel import Session, func, select

from brackets.database import get_session
from brackets.models.group import Group
from brackets.models.match import Match
from brackets.models.team import Team
from brackets.models.tournament import Tournament

logger = logging.getLogger(__name__)

router = APIRouter()


class TournamentCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class TournamentUpdate(BaseModel):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class TournamentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(session: Session = Depends(get_session)):
    """List all tournaments"""
    return session.exec(select(Tournament).order_by(Tournament.created_at, Tournament.id)).all()


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(tournament_data: TournamentCreate, session: Session = Depends(get_session)):
    """Create a new tournament"""
    tournament = Tournament(**tournament_data.model_dump())
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: str, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


@router.put("/tournaments/{tournament_id}", response_model=TournamentResponse)
def update_tournament(tournament_id: str, tournament_data: TournamentUpdate, session: Session = Depends(get_session)):
    """Rename a tournament"""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    update_data = tournament_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(tournament, field, value)

    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.delete("/tournaments/{tournament_id}", status_code=204)
def delete_tournament(tournament_id: str, session: Session = Depends(get_session)):
    """Delete a tournament with its groups, teams and matches"""
    try:
        tournament_exists = session.exec(select(func.count(Tournament.id)).where(Tournament.id == tournament_id)).one()
        if tournament_exists == 0:
            raise HTTPException(status_code=404, detail="Tournament not found")

        # Children before parents
        group_ids = select(Group.id).where(Group.tournament_id == tournament_id)
        session.execute(delete(Match).where(Match.tournament_id == tournament_id))
        session.execute(delete(Team).where(Team.group_id.in_(group_ids)))
        session.execute(delete(Group).where(Group.tournament_id == tournament_id))
        session.execute(delete(Tournament).where(Tournament.id == tournament_id))
        session.commit()

        logger.info("Deleted tournament %s", tournament_id)
        return Response(status_code=204)
    except HTTPException:
        raise
    except Exception as e:
        session.rollback()
        logger.exception("Failed to delete tournament %s", tournament_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete tournament: {str(e)}")
