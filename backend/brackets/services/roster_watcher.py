"""
Roster Watcher - creates the bracket when a group's roster is complete.

Reacts to a roster-change notification:
1. Resolve the group (missing group is an expected race, not an error)
2. Wait until the group has exactly 32 teams
3. Skip if matches already exist for the group (duplicate / replayed notification)
4. Generate 63 matches, verify the count, bulk persist once, verify created ids

Expected outcomes and invariant violations come back as a RosterChangeResult.
Collaborator failures are logged and raised as CollaboratorFailure; nothing is retried here.

The existence check in step 3 is advisory. Two concurrent notifications can both pass it;
the match store's primary key makes the second bulk insert fail as a whole.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from brackets.errors import CollaboratorFailure, GenerationInvariantViolation, PersistenceInvariantViolation
from brackets.models.match import Match
from brackets.services.bracket_generator import (
    BRACKET_SIZE,
    TOTAL_MATCHES,
    generate_double_elimination_matches,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterChangedEvent:
    """Notification that a group's roster changed. May be delivered more than once."""

    tournament_id: str
    group_id: str


class RosterChangeOutcome(str, Enum):
    GENERATED = "GENERATED"
    NOT_FOUND = "NOT_FOUND"
    NOT_READY = "NOT_READY"
    ALREADY_GENERATED = "ALREADY_GENERATED"
    GENERATION_INVARIANT_VIOLATION = "GENERATION_INVARIANT_VIOLATION"
    PERSISTENCE_INVARIANT_VIOLATION = "PERSISTENCE_INVARIANT_VIOLATION"


ERROR_OUTCOMES = {
    RosterChangeOutcome.GENERATION_INVARIANT_VIOLATION,
    RosterChangeOutcome.PERSISTENCE_INVARIANT_VIOLATION,
}


class RosterChangeResult:
    """Result of handling one roster-change notification"""

    def __init__(self, tournament_id: str, group_id: str):
        self.tournament_id = tournament_id
        self.group_id = group_id
        self.outcome: Optional[RosterChangeOutcome] = None
        self.team_count: Optional[int] = None
        self.required_team_count = BRACKET_SIZE
        self.matches_created = 0
        self.error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome not in ERROR_OUTCOMES

    def to_dict(self):
        result = {
            "outcome": self.outcome.value if self.outcome else None,
            "success": self.success,
            "tournament_id": self.tournament_id,
            "group_id": self.group_id,
            "team_count": self.team_count,
            "required_team_count": self.required_team_count,
            "matches_created": self.matches_created,
        }
        if self.error_message:
            result["error_message"] = self.error_message
        return result


class RosterWatcher:
    """
    Decides whether a roster change should produce a bracket, and persists it.

    group_lookup: object with find_group(tournament_id, group_id) -> group or None,
        where the group exposes team_count
    match_store: object with exists_for_group(tournament_id, group_id) -> bool
        and create_all(matches) -> list of created ids (all-or-nothing)
    """

    def __init__(
        self,
        group_lookup,
        match_store,
        generator: Callable[[str, str], List[Match]] = generate_double_elimination_matches,
    ):
        self._group_lookup = group_lookup
        self._match_store = match_store
        self._generator = generator

    def handle(self, event: RosterChangedEvent) -> RosterChangeResult:
        return self.on_roster_changed(event.tournament_id, event.group_id)

    def on_roster_changed(self, tournament_id: str, group_id: str) -> RosterChangeResult:
        result = RosterChangeResult(tournament_id, group_id)

        group = self._call("FIND_GROUP", self._group_lookup.find_group, tournament_id, group_id)
        if group is None:
            logger.warning("Group not found for tournament: %s, group: %s", tournament_id, group_id)
            result.outcome = RosterChangeOutcome.NOT_FOUND
            return result

        result.team_count = group.team_count
        logger.info("Tournament %s group %s has %d teams", tournament_id, group_id, result.team_count)

        if result.team_count != BRACKET_SIZE:
            if result.team_count > BRACKET_SIZE:
                logger.warning(
                    "Group %s has %d teams, more than the bracket size %d; not generating",
                    group_id,
                    result.team_count,
                    BRACKET_SIZE,
                )
            else:
                logger.info("Waiting for more teams. Current: %d, Required: %d", result.team_count, BRACKET_SIZE)
            result.outcome = RosterChangeOutcome.NOT_READY
            return result

        if self._call("EXISTS_FOR_GROUP", self._match_store.exists_for_group, tournament_id, group_id):
            logger.info("Matches already exist for tournament: %s, group: %s", tournament_id, group_id)
            result.outcome = RosterChangeOutcome.ALREADY_GENERATED
            return result

        logger.info("Creating matches for tournament: %s, group: %s", tournament_id, group_id)
        return self._create_bracket(result)

    def _create_bracket(self, result: RosterChangeResult) -> RosterChangeResult:
        try:
            matches = self._generator(result.tournament_id, result.group_id)
            if len(matches) != TOTAL_MATCHES:
                raise GenerationInvariantViolation(TOTAL_MATCHES, len(matches))
        except GenerationInvariantViolation as e:
            logger.error("Bracket generation aborted for group %s: %s", result.group_id, e)
            result.outcome = RosterChangeOutcome.GENERATION_INVARIANT_VIOLATION
            result.error_message = str(e)
            return result

        created_ids = self._call("CREATE_ALL", self._match_store.create_all, matches)

        if len(created_ids) != TOTAL_MATCHES:
            e = PersistenceInvariantViolation(TOTAL_MATCHES, len(created_ids))
            logger.error("Bracket persistence check failed for group %s: %s", result.group_id, e)
            result.outcome = RosterChangeOutcome.PERSISTENCE_INVARIANT_VIOLATION
            result.matches_created = len(created_ids)
            result.error_message = str(e)
            return result

        result.outcome = RosterChangeOutcome.GENERATED
        result.matches_created = len(created_ids)
        logger.info(
            "Successfully created %d matches for tournament: %s, group: %s",
            result.matches_created,
            result.tournament_id,
            result.group_id,
        )
        return result

    def _call(self, step: str, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            logger.exception("%s failed for roster change", step)
            raise CollaboratorFailure(step, e) from e
