"""
Engine and session setup.

DATABASE_URL picks the backend (default: a SQLite file next to the working directory).
SQL_ECHO=true logs every statement. Both are read from the environment or a .env file.
"""

import os
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./brackets.db")


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def engine_options(url: str) -> Dict[str, Any]:
    """create_engine() keyword arguments for a database URL."""
    return {
        "echo": os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes"),
        # SQLite connections are shared with the TestClient / threadpool workers
        "connect_args": {"check_same_thread": False} if _is_sqlite(url) else {},
    }


def create_db_engine(url: str = DATABASE_URL, **kwargs: Any) -> Engine:
    """Build an engine for url. Extra kwargs (e.g. poolclass) override engine_options()."""
    if _is_sqlite(url) and ":memory:" not in url:
        db_path = url.replace("sqlite:///", "", 1)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    options = engine_options(url)
    options.update(kwargs)
    return create_engine(url, **options)


engine: Engine = create_db_engine()


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables on bind (the app engine by default)."""
    # Models must be imported so they are registered on SQLModel.metadata
    from brackets.models.group import Group  # noqa: F401
    from brackets.models.match import Match  # noqa: F401
    from brackets.models.team import Team  # noqa: F401
    from brackets.models.tournament import Tournament  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
