"""
Match persistence backed by the database.

create_all() is all-or-nothing: the whole bracket is inserted in one transaction and
rolled back on any database error. A second insert of the same bracket violates the
match primary key and fails as a whole, which is what keeps concurrent duplicate
notifications from producing two brackets.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from brackets.models.match import BracketType, Match

logger = logging.getLogger(__name__)


class SqlMatchStore:
    def __init__(self, session: Session):
        self.session = session

    def exists_for_group(self, tournament_id: str, group_id: str) -> bool:
        count = self.session.exec(
            select(func.count(Match.id)).where(
                Match.tournament_id == tournament_id,
                Match.group_id == group_id,
            )
        ).one()
        return count > 0

    def create_all(self, matches: Sequence[Match]) -> List[str]:
        """Insert all matches in one transaction. Returns ids in input order."""
        ids = [m.id for m in matches]
        try:
            self.session.add_all(matches)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        logger.debug("Inserted %d matches", len(ids))
        return ids

    def find_by_tournament_and_group(self, tournament_id: str, group_id: str) -> List[Match]:
        """All matches for a group: winners, losers, then grand final, by round and position."""
        # Grand final rounds sort after both brackets
        stage = case(
            (Match.is_grand_final == True, 2),  # noqa: E712
            (Match.bracket == BracketType.LOSERS.value, 1),
            else_=0,
        )
        return list(
            self.session.exec(
                select(Match)
                .where(Match.tournament_id == tournament_id, Match.group_id == group_id)
                .order_by(stage, Match.round_number, Match.match_number_in_round)
            ).all()
        )

    def get(self, match_id: str) -> Optional[Match]:
        return self.session.get(Match, match_id)
