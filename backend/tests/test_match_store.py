"""SqlMatchStore: bulk insert is all-or-nothing, lookups are scoped and ordered."""

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from brackets.models.match import BracketType, Match
from brackets.services.bracket_generator import generate_double_elimination_matches
from brackets.services.group_lookup import SqlGroupLookup
from brackets.services.match_store import SqlMatchStore


def _count(session: Session) -> int:
    return session.exec(select(func.count(Match.id))).one()


def test_create_all_returns_ids_in_input_order(session: Session, group_factory):
    group_factory(32)
    store = SqlMatchStore(session)
    matches = generate_double_elimination_matches("T1", "G1")
    expected = [m.id for m in matches]

    created = store.create_all(matches)

    assert created == expected
    assert _count(session) == 63


def test_exists_for_group_is_scoped(session: Session, group_factory):
    group_factory(32)
    store = SqlMatchStore(session)
    assert store.exists_for_group("T1", "G1") is False

    store.create_all(generate_double_elimination_matches("T1", "G1"))

    assert store.exists_for_group("T1", "G1") is True
    assert store.exists_for_group("T1", "G2") is False
    assert store.exists_for_group("T2", "G1") is False


def test_duplicate_bracket_insert_fails_as_a_whole(session: Session, group_factory):
    group_factory(32)
    store = SqlMatchStore(session)
    store.create_all(generate_double_elimination_matches("T1", "G1"))
    session.expunge_all()

    with pytest.raises(SQLAlchemyError):
        store.create_all(generate_double_elimination_matches("T1", "G1"))

    # Original bracket intact, nothing half-written
    assert _count(session) == 63


def test_find_by_tournament_and_group_order(session: Session, group_factory):
    group_factory(32)
    store = SqlMatchStore(session)
    store.create_all(generate_double_elimination_matches("T1", "G1"))

    found = store.find_by_tournament_and_group("T1", "G1")

    assert len(found) == 63
    assert [m.id for m in found[:2]] == ["T1_WR1M0", "T1_WR1M1"]
    assert found[30].id == "T1_WR5M0"
    assert all(m.bracket == BracketType.LOSERS for m in found[31:61])
    assert [m.id for m in found[61:]] == ["T1_WR6M0", "T1_WR7M0"]
    assert store.find_by_tournament_and_group("T1", "nope") == []


def test_get_match(session: Session, group_factory):
    group_factory(32)
    store = SqlMatchStore(session)
    store.create_all(generate_double_elimination_matches("T1", "G1"))
    session.expunge_all()

    match = store.get("T1_LR8M0")

    assert match is not None
    assert match.bracket == "LOSERS"
    assert match.next_match_winner_id == "T1_WR6M0"
    assert store.get("T1_LR9M0") is None


def test_group_lookup_checks_tournament(session: Session, group_factory):
    group_factory(5)
    lookup = SqlGroupLookup(session)

    group = lookup.find_group("T1", "G1")

    assert group is not None
    assert group.team_count == 5
    assert lookup.find_group("T2", "G1") is None
    assert lookup.find_group("T1", "G2") is None
