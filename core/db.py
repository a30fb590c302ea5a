"""
core/db.py — SQLAlchemy 데이터베이스 연결 관리

세션 사용법:
    # 컨텍스트 매니저 (권장): 블록 하나가 트랜잭션 하나
    from core.db import get_db
    with get_db() as db:
        db.add(sport)

    # 주입된 sessionmaker 로 트랜잭션 열기 (서비스·테스트용)
    from core.db import session_scope
    with session_scope(factory) as db:
        ...

    # FastAPI Dependency Injection
    from core.db import get_db_dep
    def route(db: Session = Depends(get_db_dep)):
        ...

연결 풀 설정:
    pool_size=5        동시 연결 수 (기본)
    max_overflow=10    풀 초과 시 추가 허용 연결
    pool_pre_ping=True 연결 유효성 사전 확인 (Serverless DB 재연결)
    pool_recycle=1800  30분 후 연결 재생성 (RDS 유휴 타임아웃 대응)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────
# 엔진 생성 (앱 프로세스당 1개)
# ─────────────────────────────────────────────────────────────

def _normalize_url(url: str) -> str:
    # SQLAlchemy 2.x: postgres:// → postgresql://
    return url.replace("postgres://", "postgresql://", 1)


def _make_engine() -> Engine:
    from core.config import settings

    if not settings.DATABASE_URL:
        raise RuntimeError(
            "DATABASE_URL 이 설정되지 않았습니다. .env 파일 또는 환경변수를 확인해주세요."
        )

    url  = _normalize_url(settings.DATABASE_URL)
    echo = settings.ENVIRONMENT == "development" and settings.LOG_LEVEL.upper() == "DEBUG"

    if not url.startswith("postgresql"):
        # SQLite 등 로컬 개발 DB: 풀/타임존 옵션 없이 생성
        return create_engine(url, echo=echo)

    eng = create_engine(
        url,
        pool_pre_ping=True,       # SELECT 1 로 연결 유효성 확인
        pool_size=5,
        max_overflow=10,
        pool_recycle=1800,        # 30분 후 연결 재생성
        echo=echo,
        connect_args={
            "connect_timeout": 10,
            "application_name": "sportslive-seo",
        },
    )

    # 연결 이벤트: 타임존 고정
    @event.listens_for(eng, "connect")
    def _set_timezone(dbapi_conn, connection_record):
        with dbapi_conn.cursor() as cur:
            cur.execute("SET TIME ZONE 'UTC'")

    return eng


# 모듈 임포트 시점에 바로 생성하지 않고, 첫 사용 시 생성
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def make_session_factory(eng: Engine) -> sessionmaker:
    """엔진에 바인딩된 sessionmaker 를 만듭니다 (앱·테스트 공통 옵션)."""
    return sessionmaker(
        bind=eng,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,   # 커밋 후 객체 재조회 방지
    )


def get_engine() -> Engine:
    global _engine, _SessionLocal
    if _engine is None:
        _engine = _make_engine()
        _SessionLocal = make_session_factory(_engine)
        logger.info("SQLAlchemy 엔진 초기화 완료")
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()   # 엔진 초기화 보장
    assert _SessionLocal is not None
    return _SessionLocal


# ─────────────────────────────────────────────────────────────
# 세션 컨텍스트 매니저
# ─────────────────────────────────────────────────────────────

@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    주어진 sessionmaker 로 트랜잭션 하나를 엽니다.

    성공 시 커밋, 예외 시 롤백, 항상 닫음.
    """
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    기본 엔진의 SQLAlchemy 세션 컨텍스트 매니저.

    Usage:
        with get_db() as db:
            db.add(Sport(slug="soccer", name_en="Soccer"))
        # ← 자동 커밋
    """
    with session_scope(get_session_factory()) as session:
        yield session


def get_db_dep() -> Generator[Session, None, None]:
    """
    FastAPI Dependency Injection 용 세션 제너레이터.

    Usage:
        from fastapi import Depends
        def endpoint(db: Session = Depends(get_db_dep)):
            ...
    """
    with session_scope(get_session_factory()) as session:
        yield session


# ─────────────────────────────────────────────────────────────
# 헬스체크
# ─────────────────────────────────────────────────────────────

def ping_db(factory: Optional[sessionmaker] = None) -> bool:
    """DB 연결 가능 여부를 확인합니다. True 반환 시 정상."""
    try:
        with session_scope(factory or get_session_factory()) as session:
            session.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.error("DB 연결 실패: %s", exc)
        return False
