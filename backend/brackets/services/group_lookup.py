"""Group lookup backed by the database."""

from typing import Optional

from sqlmodel import Session, select

from brackets.models.group import Group


class SqlGroupLookup:
    def __init__(self, session: Session):
        self.session = session

    def find_group(self, tournament_id: str, group_id: str) -> Optional[Group]:
        """Return the group if it belongs to the tournament, else None."""
        return self.session.exec(
            select(Group).where(Group.id == group_id, Group.tournament_id == tournament_id)
        ).first()
