"""
publishing/models.py — Pydantic v2 요청/응답 모델

  PredictionDraft   : 발행 요청에 포함된 베팅 예측 1건
  AnalysisDraft     : 분석글 발행 요청 본문 (camelCase / snake_case 모두 허용)
  PredictionOut     : 저장된 예측 (ORM → 응답)
  AnalysisOut       : 저장된 분석글 (ORM → 응답)
  PublishResponse   : POST /analysis 응답
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from database.models import BetType, PredictionResult

_DATE_ONLY_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

_DRAFT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


# ─────────────────────────────────────────────────────────────
# 1. 발행 요청
# ─────────────────────────────────────────────────────────────

class PredictionDraft(BaseModel):
    """베팅 예측 1건."""

    bet_type:   BetType
    prediction: str             = Field(..., min_length=1, max_length=300)
    odds:       Optional[float] = Field(None, gt=0)
    stake:      Optional[int]   = Field(None, ge=0)
    reasoning:  Optional[str]   = None

    model_config = _DRAFT_CONFIG

    @field_validator("reasoning", mode="before")
    @classmethod
    def empty_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class AnalysisDraft(BaseModel):
    """
    분석글 발행 요청.

    유효성 규칙:
      - matchDate 는 ISO-8601 ('2025-08-16' 또는 '2025-08-16T19:30:00+09:00')
      - sportType / league / homeTeam / awayTeam / title 필수 (공백만 불허)
      - predictions 는 1건 이상
      - 홈/원정 팀 이름이 같으면 오류 (대소문자 무시)
      - 선택 텍스트 필드의 빈 문자열은 None
    """

    match_date: datetime
    sport_type: str           = Field(..., min_length=1, max_length=50)
    league:     str           = Field(..., min_length=1, max_length=200)
    competition: Optional[str] = Field(None, max_length=200)
    home_team:  str           = Field(..., min_length=1, max_length=200)
    away_team:  str           = Field(..., min_length=1, max_length=200)

    # SEO
    title:            str           = Field(..., min_length=1, max_length=300)
    meta_description: Optional[str] = None
    meta_keywords:    list[str]     = Field(default_factory=list)

    # 분석 본문
    home_formation:     Optional[str] = Field(None, max_length=20)
    away_formation:     Optional[str] = Field(None, max_length=20)
    home_analysis:      Optional[str] = None
    away_analysis:      Optional[str] = None
    tactical_analysis:  Optional[str] = None
    key_players:        Optional[Any] = None
    injury_info:        Optional[Any] = None
    head_to_head:       Optional[Any] = None
    recent_form:        Optional[Any] = None
    prediction_summary: Optional[str] = None
    confidence_level:   Optional[int] = Field(None, ge=0, le=100)

    predictions: list[PredictionDraft] = Field(..., min_length=1)

    model_config = _DRAFT_CONFIG

    # ── 유효성 검증 ──────────────────────────────────────────

    @field_validator("match_date", mode="before")
    @classmethod
    def parse_date_only(cls, v: object) -> object:
        """'YYYY-MM-DD' 만 온 경우 자정으로 간주."""
        if isinstance(v, str) and _DATE_ONLY_RE.match(v.strip()):
            return datetime.fromisoformat(v.strip())
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        return v

    @field_validator(
        "competition", "meta_description", "home_formation", "away_formation",
        "home_analysis", "away_analysis", "tactical_analysis", "prediction_summary",
        mode="before",
    )
    @classmethod
    def empty_to_none(cls, v: object) -> object:
        """빈 문자열을 None으로 변환."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("meta_keywords", mode="before")
    @classmethod
    def clean_keywords(cls, v: object) -> list[str]:
        """None → [], 공백 항목 제거, 순서 유지 중복 제거."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("metaKeywords 는 문자열 배열이어야 합니다.")
        cleaned = [str(k).strip() for k in v if k is not None and str(k).strip()]
        return list(dict.fromkeys(cleaned))

    @model_validator(mode="after")
    def distinct_teams(self) -> "AnalysisDraft":
        if self.home_team.casefold() == self.away_team.casefold():
            raise ValueError("homeTeam 과 awayTeam 이 같습니다.")
        return self


# ─────────────────────────────────────────────────────────────
# 2. 응답
# ─────────────────────────────────────────────────────────────

class PredictionOut(BaseModel):
    """저장된 예측."""

    id:         int
    bet_type:   str
    prediction: str
    odds:       Optional[float] = None
    stake:      Optional[int]   = None
    reasoning:  Optional[str]   = None
    result:     str             = PredictionResult.PENDING.value

    model_config = ConfigDict(from_attributes=True)


class AnalysisOut(BaseModel):
    """저장된 분석글 (ORM → 응답)."""

    id:        int
    author_id: int
    slug:      str
    seo_slug:  str

    sport_id:     int
    league_id:    int
    home_team_id: int
    away_team_id: int

    match_date:  datetime
    sport_type:  str
    league:      str
    competition: Optional[str] = None
    home_team:   str
    away_team:   str

    title:            str
    meta_description: Optional[str] = None
    meta_keywords:    list[str]     = Field(default_factory=list)

    home_formation:     Optional[str] = None
    away_formation:     Optional[str] = None
    home_analysis:      Optional[str] = None
    away_analysis:      Optional[str] = None
    tactical_analysis:  Optional[str] = None
    key_players:        Optional[Any] = None
    injury_info:        Optional[Any] = None
    head_to_head:       Optional[Any] = None
    recent_form:        Optional[Any] = None
    prediction_summary: Optional[str] = None
    confidence_level:   Optional[int] = None

    status:       str
    is_published: bool
    published_at: Optional[datetime] = None
    views:        int
    created_at:   Optional[datetime] = None
    updated_at:   Optional[datetime] = None

    predictions: list[PredictionOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)   # SQLAlchemy ORM → Pydantic 변환


class PublishResponse(BaseModel):
    """POST /analysis 응답."""

    analysis:      AnalysisOut
    seo_url:       str
    canonical_url: str
