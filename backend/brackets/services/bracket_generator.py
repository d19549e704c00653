"""
Double elimination bracket generation for a fixed 32-team group.

Produces 63 linked matches:
- Winners bracket: 16 -> 8 -> 4 -> 2 -> 1 (31 matches)
- Losers bracket: 8 -> 8 -> 4 -> 4 -> 2 -> 2 -> 1 -> 1 (30 matches)
- Grand final plus bracket reset (2 matches, winners rounds 6 and 7)

Pure: no session, no I/O. Same inputs always give the same match ids and edges.
"""

from typing import Dict, List, Tuple

from brackets.errors import GenerationInvariantViolation
from brackets.models.match import BracketType, Match, MatchStatus

BRACKET_SIZE = 32

WINNERS_ROUND_SIZES = [16, 8, 4, 2, 1]
LOSERS_ROUND_SIZES = [8, 8, 4, 4, 2, 2, 1, 1]

GRAND_FINAL_ROUND = len(WINNERS_ROUND_SIZES) + 1
BRACKET_RESET_ROUND = GRAND_FINAL_ROUND + 1

# Winners round -> losers round that receives its losers.
# Losers rounds 3, 5 and 7 are consolidation only (no dropouts); round 8 is the losers final.
LOSER_DROP_ROUNDS = {1: 1, 2: 2, 3: 4, 4: 6, 5: 8}

# 31 winners + 30 losers + grand final and reset
TOTAL_MATCHES = 63


def match_id(tournament_id: str, bracket: BracketType, round_number: int, match_number: int) -> str:
    """Deterministic match id, e.g. "T1_WR1M0" or "T1_LR2M3"."""
    prefix = "W" if bracket == BracketType.WINNERS else "L"
    return f"{tournament_id}_{prefix}R{round_number}M{match_number}"


def loser_drop_match_number(winners_round: int, match_number: int) -> int:
    """Match number in the receiving losers round for the loser of a winners match.

    Round 1 feeds two losers into each losers match; later rounds map one to one.
    """
    if winners_round == 1:
        return match_number // 2
    return match_number


def _build_round_matches(
    tournament_id: str,
    group_id: str,
    bracket: BracketType,
    round_sizes: List[int],
) -> List[Match]:
    matches = []
    last_round = len(round_sizes)

    for round_number, matches_in_round in enumerate(round_sizes, start=1):
        for match_number in range(matches_in_round):
            match = Match(
                id=match_id(tournament_id, bracket, round_number, match_number),
                tournament_id=tournament_id,
                group_id=group_id,
                bracket=bracket,
                round_number=round_number,
                match_number_in_round=match_number,
                status=MatchStatus.PENDING,
            )
            # Two matches of round r feed one match of round r+1
            if round_number < last_round:
                match.next_match_winner_id = match_id(tournament_id, bracket, round_number + 1, match_number // 2)
            matches.append(match)

    return matches


def create_winners_bracket(tournament_id: str, group_id: str) -> List[Match]:
    """Winners bracket, 31 matches. Winners final has no winner edge yet."""
    return _build_round_matches(tournament_id, group_id, BracketType.WINNERS, WINNERS_ROUND_SIZES)


def create_losers_bracket(tournament_id: str, group_id: str) -> List[Match]:
    """Losers bracket, 30 matches. Losers final has no winner edge yet."""
    return _build_round_matches(tournament_id, group_id, BracketType.LOSERS, LOSERS_ROUND_SIZES)


def link_loser_paths(winners_matches: List[Match], losers_matches: List[Match]) -> None:
    """
    Point every winners-bracket match at the losers-bracket match its loser drops into.

    Mutates winners_matches in place. Raises KeyError if a computed target does not exist,
    which would mean the round tables are out of sync.
    """
    losers_by_position: Dict[Tuple[int, int], Match] = {
        (m.round_number, m.match_number_in_round): m for m in losers_matches
    }

    for match in winners_matches:
        losers_round = LOSER_DROP_ROUNDS[match.round_number]
        target = losers_by_position[
            (losers_round, loser_drop_match_number(match.round_number, match.match_number_in_round))
        ]
        match.next_match_loser_id = target.id


def create_grand_final(tournament_id: str, group_id: str) -> List[Match]:
    """Grand final and bracket reset. The reset is always generated; execution may skip it."""
    grand_final = Match(
        id=match_id(tournament_id, BracketType.WINNERS, GRAND_FINAL_ROUND, 0),
        tournament_id=tournament_id,
        group_id=group_id,
        bracket=BracketType.WINNERS,
        round_number=GRAND_FINAL_ROUND,
        match_number_in_round=0,
        status=MatchStatus.PENDING,
        is_grand_final=True,
        is_bracket_reset=False,
    )
    bracket_reset = Match(
        id=match_id(tournament_id, BracketType.WINNERS, BRACKET_RESET_ROUND, 0),
        tournament_id=tournament_id,
        group_id=group_id,
        bracket=BracketType.WINNERS,
        round_number=BRACKET_RESET_ROUND,
        match_number_in_round=0,
        status=MatchStatus.PENDING,
        is_grand_final=True,
        is_bracket_reset=True,
    )
    grand_final.next_match_winner_id = bracket_reset.id

    return [grand_final, bracket_reset]


def generate_double_elimination_matches(tournament_id: str, group_id: str) -> List[Match]:
    """
    Generate all 63 matches for a 32-team double elimination group.

    Order: winners (31), losers (30), grand final (2).

    Raises:
        GenerationInvariantViolation: if the match count is not 63
    """
    winners_matches = create_winners_bracket(tournament_id, group_id)
    losers_matches = create_losers_bracket(tournament_id, group_id)
    link_loser_paths(winners_matches, losers_matches)
    grand_final_matches = create_grand_final(tournament_id, group_id)

    # Both bracket champions meet in the first grand final match
    winners_matches[-1].next_match_winner_id = grand_final_matches[0].id
    losers_matches[-1].next_match_winner_id = grand_final_matches[0].id

    all_matches = winners_matches + losers_matches + grand_final_matches
    if len(all_matches) != TOTAL_MATCHES:
        raise GenerationInvariantViolation(TOTAL_MATCHES, len(all_matches))

    return all_matches
