import os

# Keep the app's own engine off disk; set before brackets.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from brackets.database import create_db_engine, get_session, init_db  # noqa: E402
from brackets.main import app  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. Use sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False comes from engine_options() for any SQLite URL
# 3. init_db() imports all models before create_all()
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables dropped and recreated for every test
test_engine = create_db_engine(TEST_DATABASE_URL, poolclass=StaticPool)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a fresh schema"""
    SQLModel.metadata.drop_all(test_engine)
    init_db(test_engine)

    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place
    for the entire duration. This ensures the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def group_factory(session: Session):
    """Create a tournament and a group holding team_count teams. Returns (tournament, group)."""
    from brackets.models.group import Group
    from brackets.models.team import Team
    from brackets.models.tournament import Tournament

    def _make(team_count: int, tournament_id: str = "T1", group_id: str = "G1"):
        tournament = Tournament(id=tournament_id, name=f"Tournament {tournament_id}")
        group = Group(id=group_id, tournament_id=tournament_id, name=f"Group {group_id}")
        session.add(tournament)
        session.add(group)
        for i in range(team_count):
            session.add(Team(group_id=group_id, name=f"Team {i + 1}"))
        session.commit()
        session.refresh(group)
        return tournament, group

    return _make
