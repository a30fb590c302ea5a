"""Shared pytest fixtures and configuration."""

import os

# Settings are read once on first import, so pin them before anything loads core.config.
os.environ["ENVIRONMENT"] = "test"
os.environ["MATCH_TIMEZONE"] = "UTC"
os.environ["BASE_URL"] = "https://sportslive.com"
os.environ["SUPPORTED_LANGUAGES"] = "ko,en"
os.environ.pop("SLUG_MAX_SUFFIX", None)

from datetime import datetime, timezone  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any, Iterator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from core.db import make_session_factory, session_scope  # noqa: E402
from database.base import Base  # noqa: E402
from database.models import AnalystProfile  # noqa: E402
from publishing.models import AnalysisDraft  # noqa: E402

AUTHOR_ID = 7


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """File-backed SQLite engine with working SAVEPOINT support."""
    eng = create_engine(f"sqlite:///{tmp_path / 'sportslive.db'}")

    # pysqlite 의 자체 트랜잭션 처리를 끄고 BEGIN 을 직접 보내야 SAVEPOINT 가 동작함
    @event.listens_for(eng, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the test engine."""
    return make_session_factory(engine)


@pytest.fixture
def analyst(session_factory: sessionmaker) -> int:
    """Create the analyst profile publishes are counted against."""
    with session_scope(session_factory) as session:
        session.add(AnalystProfile(user_id=AUTHOR_ID, display_name="Tactics Lab"))
    return AUTHOR_ID


@pytest.fixture
def draft_payload() -> dict[str, Any]:
    """A camelCase publish request body."""
    return {
        "matchDate": "2025-08-16T19:30:00+00:00",
        "sportType": "축구",
        "league": "EPL",
        "homeTeam": "Liverpool FC",
        "awayTeam": "Bournemouth",
        "title": "Liverpool vs Bournemouth preview",
        "metaDescription": "Opening weekend analysis",
        "metaKeywords": ["liverpool", "bournemouth", "liverpool"],
        "homeFormation": "4-3-3",
        "awayFormation": "4-2-3-1",
        "homeAnalysis": "High press through the middle.",
        "awayAnalysis": "Quick transitions on the flanks.",
        "keyPlayers": {"home": [{"name": "Salah", "position": "RW", "status": "fit"}], "away": []},
        "predictionSummary": "Home win expected.",
        "confidenceLevel": 70,
        "predictions": [
            {"betType": "match_result", "prediction": "Liverpool win", "odds": 1.45, "stake": 3},
            {"betType": "over_under", "prediction": "Over 2.5", "odds": 1.8, "reasoning": "Both sides attack."},
        ],
    }


@pytest.fixture
def draft(draft_payload: dict[str, Any]) -> AnalysisDraft:
    """Validated publish request."""
    return AnalysisDraft.model_validate(draft_payload)


@pytest.fixture
def match_date() -> datetime:
    """Kick-off used by most taxonomy tests."""
    return datetime(2025, 8, 16, 19, 30, tzinfo=timezone.utc)
