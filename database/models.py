"""
database/models.py — SQLAlchemy ORM 모델

테이블:
    sports                — 종목 (축구, 야구 ...)           slug 전역 유니크
    leagues               — 리그 (종목 소속)                 slug 는 종목 내 유니크
    teams                 — 팀 (종목 소속)                   slug 전역 유니크
    team_league_seasons   — 팀 ↔ 리그 시즌 소속 (team, league, season) 유니크
    analyst_profiles      — 분석가 누적 통계 (사용자 자체는 외부 인증 시스템 소유)
    sport_analyses        — 경기 분석글 (레거시 slug + SEO slug 이중 식별자)
    analysis_predictions  — 분석글별 베팅 예측

설계 원칙:
    - 분류 체계(sports/leagues/teams/team_league_seasons)는 누적 전용.
      최초 참조 시 한 번 생성되고, 이 서비스는 수정·삭제하지 않는다.
    - slug 는 한 번 부여되면 바뀌지 않는다.
    - keywords / meta_keywords 는 PostgreSQL TEXT[] (그 외 DB 는 JSON) 으로 저장.

Alembic 기준 파일 — 여기서 모델 변경 → alembic revision --autogenerate
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.base import Base

# PostgreSQL TIMESTAMP WITH TIME ZONE 편의 별칭
TIMESTAMPTZ = DateTime(timezone=True)

# 문자열 배열: PostgreSQL 은 TEXT[], 그 외(SQLite 테스트 등)는 JSON
StringList = JSON().with_variant(ARRAY(Text), "postgresql")

# 반구조화 데이터: PostgreSQL 은 JSONB
JSONDoc = JSON().with_variant(JSONB, "postgresql")

# 국가 코드를 찾지 못한 리그의 표식
UNKNOWN_COUNTRY = "XX"


def _utcnow() -> datetime:
    # flush 직후에도 created_at / updated_at 을 메모리에서 바로 읽을 수 있도록 Python 측 기본값
    return datetime.now(timezone.utc)


# ═════════════════════════════════════════════════════════════
# Python Enum 정의
# ═════════════════════════════════════════════════════════════

class AnalysisStatus(str, enum.Enum):
    """분석글 상태 — sport_analyses.status"""
    DRAFT     = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED  = "ARCHIVED"


class BetType(str, enum.Enum):
    """예측 유형 — analysis_predictions.bet_type"""
    MATCH_RESULT  = "match_result"   # 승무패
    HANDICAP      = "handicap"       # 핸디캡
    OVER_UNDER    = "over_under"     # 오버/언더
    BOTH_SCORE    = "both_score"     # 양팀득점
    CORRECT_SCORE = "correct_score"  # 정확한 스코어
    FIRST_GOAL    = "first_goal"     # 첫 득점
    HALF_TIME     = "half_time"      # 전반전 결과
    SPECIAL       = "special"        # 특별 베팅


class PredictionResult(str, enum.Enum):
    """예측 적중 결과 — analysis_predictions.result"""
    PENDING   = "pending"
    CORRECT   = "correct"
    INCORRECT = "incorrect"
    PARTIAL   = "partial"
    CANCELLED = "cancelled"


def _in_clause(column: str, enum_cls: type[enum.Enum]) -> str:
    values = ",".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


# ═════════════════════════════════════════════════════════════
# Sport
# ═════════════════════════════════════════════════════════════

class Sport(Base):
    """
    종목 마스터.

    slug 예: soccer, baseball, basketball, esports
    """
    __tablename__ = "sports"

    id:       Mapped[int]           = mapped_column(Integer, primary_key=True)
    slug:     Mapped[str]           = mapped_column(String(100), nullable=False, unique=True)
    name_en:  Mapped[str]           = mapped_column(String(200), nullable=False)
    name_ko:  Mapped[str]           = mapped_column(String(200), nullable=False)
    icon:     Mapped[Optional[str]] = mapped_column(String(16))
    keywords: Mapped[list[str]]     = mapped_column(StringList, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())

    # ── 관계 ──────────────────────────────────────────────────
    leagues: Mapped[list["League"]] = relationship(back_populates="sport")
    teams:   Mapped[list["Team"]]   = relationship(back_populates="sport")

    def __repr__(self) -> str:
        return f"<Sport id={self.id} slug={self.slug!r}>"


# ═════════════════════════════════════════════════════════════
# League
# ═════════════════════════════════════════════════════════════

class League(Base):
    """
    리그 마스터.

    slug 는 종목 안에서만 유니크합니다 (UNIQUE(sport_id, slug)).
    country 는 ISO 3166-1 alpha-2, 판별 실패 시 'XX'.
    current_season 은 생성 시점 경기일 기준 'YYYY/YY' (8월 시작).
    """
    __tablename__ = "leagues"

    id:             Mapped[int]           = mapped_column(Integer, primary_key=True)
    slug:           Mapped[str]           = mapped_column(String(100), nullable=False)
    sport_id:       Mapped[int]           = mapped_column(
        Integer, ForeignKey("sports.id", ondelete="RESTRICT"), nullable=False,
    )
    name_en:        Mapped[str]           = mapped_column(String(200), nullable=False)
    name_ko:        Mapped[str]           = mapped_column(String(200), nullable=False)
    country:        Mapped[str]           = mapped_column(String(2), nullable=False, default=UNKNOWN_COUNTRY)
    current_season: Mapped[Optional[str]] = mapped_column(String(9))
    keywords:       Mapped[list[str]]     = mapped_column(StringList, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())

    # ── 관계 ──────────────────────────────────────────────────
    sport:        Mapped["Sport"]                  = relationship(back_populates="leagues")
    team_seasons: Mapped[list["TeamLeagueSeason"]] = relationship(back_populates="league")

    __table_args__ = (
        UniqueConstraint("sport_id", "slug", name="uq_leagues_sport_slug"),
        Index("idx_leagues_country", "country"),
    )

    def __repr__(self) -> str:
        return f"<League id={self.id} sport_id={self.sport_id} slug={self.slug!r}>"


# ═════════════════════════════════════════════════════════════
# Team
# ═════════════════════════════════════════════════════════════

class Team(Base):
    """
    팀 마스터. slug 는 전역 유니크 — 서로 다른 종목도 같은 slug 를 공유할 수 없습니다.
    """
    __tablename__ = "teams"

    id:       Mapped[int]       = mapped_column(Integer, primary_key=True)
    slug:     Mapped[str]       = mapped_column(String(150), nullable=False, unique=True)
    sport_id: Mapped[int]       = mapped_column(
        Integer, ForeignKey("sports.id", ondelete="RESTRICT"), nullable=False,
    )
    name_en:  Mapped[str]       = mapped_column(String(200), nullable=False)
    name_ko:  Mapped[str]       = mapped_column(String(200), nullable=False)
    country:  Mapped[str]       = mapped_column(String(2), nullable=False, default=UNKNOWN_COUNTRY)
    keywords: Mapped[list[str]] = mapped_column(StringList, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())

    # ── 관계 ──────────────────────────────────────────────────
    sport:          Mapped["Sport"]                  = relationship(back_populates="teams")
    league_seasons: Mapped[list["TeamLeagueSeason"]] = relationship(back_populates="team")

    __table_args__ = (
        Index("idx_teams_sport_id", "sport_id"),
    )

    def __repr__(self) -> str:
        return f"<Team id={self.id} slug={self.slug!r}>"


# ═════════════════════════════════════════════════════════════
# TeamLeagueSeason
# ═════════════════════════════════════════════════════════════

class TeamLeagueSeason(Base):
    """팀의 리그·시즌 소속. 팀이 해당 리그/시즌에서 처음 등장할 때 생성됩니다."""
    __tablename__ = "team_league_seasons"

    id:        Mapped[int] = mapped_column(Integer, primary_key=True)
    team_id:   Mapped[int] = mapped_column(
        Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False,
    )
    league_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False,
    )
    season:    Mapped[str] = mapped_column(String(9), nullable=False)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())

    # ── 관계 ──────────────────────────────────────────────────
    team:   Mapped["Team"]   = relationship(back_populates="league_seasons")
    league: Mapped["League"] = relationship(back_populates="team_seasons")

    __table_args__ = (
        UniqueConstraint("team_id", "league_id", "season", name="uq_team_league_season"),
        Index("idx_tls_league_season", "league_id", "season"),
    )

    def __repr__(self) -> str:
        return (
            f"<TeamLeagueSeason team={self.team_id} "
            f"league={self.league_id} season={self.season!r}>"
        )


# ═════════════════════════════════════════════════════════════
# AnalystProfile
# ═════════════════════════════════════════════════════════════

class AnalystProfile(Base):
    """
    분석가 누적 통계.

    user_id 는 외부 인증 시스템의 사용자 ID 입니다 (FK 없음).
    발행 시 total_predictions, 조회 시 total_views 가 증가합니다.
    """
    __tablename__ = "analyst_profiles"

    id:                  Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id:             Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    display_name:        Mapped[str] = mapped_column(String(100), nullable=False)
    total_predictions:   Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_views:         Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now(), onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<AnalystProfile user_id={self.user_id} predictions={self.total_predictions}>"


# ═════════════════════════════════════════════════════════════
# SportAnalysis
# ═════════════════════════════════════════════════════════════

class SportAnalysis(Base):
    """
    경기 분석글.

    식별자 두 개가 항상 함께 저장됩니다:
        slug      레거시 평면 slug   2025-08-16-liverpool-vs-bournemouth[-n]  (유니크)
        seo_slug  계층형 SEO 경로    soccer/premier-league/2025/08/liverpool-vs-bournemouth
                  (같은 경기에 분석가 여러 명이 글을 쓸 수 있으므로 유니크 아님)

    sport_type / league / home_team / away_team 은 작성자가 입력한 원문 텍스트,
    *_id 컬럼은 분류 체계로 정규화된 참조입니다.
    """
    __tablename__ = "sport_analyses"

    id:        Mapped[int]      = mapped_column(Integer, primary_key=True)
    author_id: Mapped[int]      = mapped_column(Integer, nullable=False)
    slug:      Mapped[str]      = mapped_column(String(255), nullable=False, unique=True)
    seo_slug:  Mapped[str]      = mapped_column(String(520), nullable=False)  # 최대 514자: 100+100+날짜+150*2+구분자

    # ── 분류 체계 참조 ────────────────────────────────────────
    sport_id:     Mapped[int] = mapped_column(Integer, ForeignKey("sports.id"),  nullable=False)
    league_id:    Mapped[int] = mapped_column(Integer, ForeignKey("leagues.id"), nullable=False)
    home_team_id: Mapped[int] = mapped_column(Integer, ForeignKey("teams.id"),   nullable=False)
    away_team_id: Mapped[int] = mapped_column(Integer, ForeignKey("teams.id"),   nullable=False)

    # ── 경기 정보 (입력 원문) ─────────────────────────────────
    match_date:  Mapped[datetime]      = mapped_column(TIMESTAMPTZ, nullable=False)
    sport_type:  Mapped[str]           = mapped_column(String(50),  nullable=False)
    league:      Mapped[str]           = mapped_column(String(200), nullable=False)
    competition: Mapped[Optional[str]] = mapped_column(String(200))
    home_team:   Mapped[str]           = mapped_column(String(200), nullable=False)
    away_team:   Mapped[str]           = mapped_column(String(200), nullable=False)

    # ── SEO ───────────────────────────────────────────────────
    title:            Mapped[str]           = mapped_column(String(300), nullable=False)
    meta_description: Mapped[Optional[str]] = mapped_column(Text)
    meta_keywords:    Mapped[list[str]]     = mapped_column(StringList, nullable=False, default=list)

    # ── 분석 본문 ─────────────────────────────────────────────
    home_formation:     Mapped[Optional[str]] = mapped_column(String(20))
    away_formation:     Mapped[Optional[str]] = mapped_column(String(20))
    home_analysis:      Mapped[Optional[str]] = mapped_column(Text)
    away_analysis:      Mapped[Optional[str]] = mapped_column(Text)
    tactical_analysis:  Mapped[Optional[str]] = mapped_column(Text)
    key_players:        Mapped[Optional[Any]] = mapped_column(JSONDoc)
    injury_info:        Mapped[Optional[Any]] = mapped_column(JSONDoc)
    head_to_head:       Mapped[Optional[Any]] = mapped_column(JSONDoc)
    recent_form:        Mapped[Optional[Any]] = mapped_column(JSONDoc)
    prediction_summary: Mapped[Optional[str]] = mapped_column(Text)
    confidence_level:   Mapped[Optional[int]] = mapped_column(Integer)

    # ── 상태·통계 ─────────────────────────────────────────────
    status:       Mapped[str]                = mapped_column(
        String(20), nullable=False, default=AnalysisStatus.DRAFT.value,
    )
    is_published: Mapped[bool]               = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMPTZ)
    views:        Mapped[int]                = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now(), onupdate=_utcnow,
    )

    # ── 관계 ──────────────────────────────────────────────────
    sport:        Mapped["Sport"]  = relationship(foreign_keys=[sport_id])
    league_ref:   Mapped["League"] = relationship(foreign_keys=[league_id])
    home_team_ref: Mapped["Team"]  = relationship(foreign_keys=[home_team_id])
    away_team_ref: Mapped["Team"]  = relationship(foreign_keys=[away_team_id])
    predictions:  Mapped[list["AnalysisPrediction"]] = relationship(
        back_populates="analysis",
        cascade="all, delete-orphan",
        order_by="AnalysisPrediction.id",
    )

    __table_args__ = (
        CheckConstraint(_in_clause("status", AnalysisStatus), name="ck_analyses_status"),
        CheckConstraint(
            "confidence_level IS NULL OR confidence_level BETWEEN 0 AND 100",
            name="ck_analyses_confidence",
        ),
        Index("idx_analyses_seo_slug",     "seo_slug"),
        Index("idx_analyses_match_date",   "sport_id", "league_id", "match_date"),
        Index("idx_analyses_author",       "author_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<SportAnalysis id={self.id} slug={self.slug!r} seo_slug={self.seo_slug!r}>"


# ═════════════════════════════════════════════════════════════
# AnalysisPrediction
# ═════════════════════════════════════════════════════════════

class AnalysisPrediction(Base):
    """분석글에 딸린 베팅 예측. 분석글과 같은 트랜잭션에서 생성됩니다."""
    __tablename__ = "analysis_predictions"

    id:          Mapped[int] = mapped_column(Integer, primary_key=True)
    analysis_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sport_analyses.id", ondelete="CASCADE"), nullable=False,
    )
    author_id:   Mapped[int]             = mapped_column(Integer, nullable=False)
    bet_type:    Mapped[str]             = mapped_column(String(30), nullable=False)
    prediction:  Mapped[str]             = mapped_column(String(300), nullable=False)
    odds:        Mapped[Optional[float]] = mapped_column(Float)
    stake:       Mapped[Optional[int]]   = mapped_column(Integer)
    reasoning:   Mapped[Optional[str]]   = mapped_column(Text)
    result:      Mapped[str]             = mapped_column(
        String(20), nullable=False, default=PredictionResult.PENDING.value,
    )

    created_at: Mapped[datetime] = mapped_column(TIMESTAMPTZ, nullable=False, default=_utcnow, server_default=func.now())

    # ── 관계 ──────────────────────────────────────────────────
    analysis: Mapped["SportAnalysis"] = relationship(back_populates="predictions")

    __table_args__ = (
        CheckConstraint(_in_clause("bet_type", BetType), name="ck_predictions_bet_type"),
        CheckConstraint(_in_clause("result", PredictionResult), name="ck_predictions_result"),
        CheckConstraint("odds IS NULL OR odds > 0", name="ck_predictions_odds"),
        Index("idx_predictions_analysis", "analysis_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<AnalysisPrediction id={self.id} analysis={self.analysis_id} "
            f"{self.bet_type}={self.prediction!r}>"
        )
