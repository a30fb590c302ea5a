"""
publishing/lookup.py — SEO / 레거시 경로 → 분석글 조회, 조회수 누적

조회 순서:
  1. seo_slug 일치 (저장 변형 'x', '/x', 'analysis/x' 모두 허용), 같은 경기에 글이
     여러 개면 id 가 가장 작은 글
  2. 경로 마지막 세그먼트를 레거시 slug 로 간주해 slug 일치

두 경우 모두 발행(PUBLISHED) 상태인 글만 찾습니다.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.logger import Phase, log_context
from database.models import AnalysisStatus, AnalystProfile, SportAnalysis
from seo.url import seo_slug_from_path

logger = structlog.get_logger(__name__)


class AnalysisLookup:
    """열린 Session 하나에 묶인 조회기."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_path(self, path: str) -> Optional[SportAnalysis]:
        """
        '/analysis/soccer/premier-league/2025/08/a-vs-b' 또는 'soccer/premier-league/...'
        또는 레거시 '/analysis/2025-08-16-a-vs-b' 를 받아 분석글을 찾습니다.
        """
        seo_slug = seo_slug_from_path(path.strip()).strip("/")
        if not seo_slug:
            return None

        with log_context(phase=Phase.LOOKUP):
            analysis = self._find_by_seo_slug(seo_slug)
            if analysis is not None:
                logger.debug("seo_slug 로 조회", seo_slug=seo_slug, analysis_id=analysis.id)
                return analysis

            legacy = seo_slug.rsplit("/", 1)[-1]
            analysis = self._find_by_legacy_slug(legacy)
            if analysis is not None:
                logger.debug("레거시 slug 로 조회", slug=legacy, analysis_id=analysis.id)
            else:
                logger.info("분석글 없음", path=path)
            return analysis

    def record_view(self, analysis: SportAnalysis) -> None:
        """분석글 views 와 작성자 total_views 를 1씩 올립니다."""
        self._session.execute(
            update(SportAnalysis)
            .where(SportAnalysis.id == analysis.id)
            .values(views=SportAnalysis.views + 1)
        )
        self._session.execute(
            update(AnalystProfile)
            .where(AnalystProfile.user_id == analysis.author_id)
            .values(total_views=AnalystProfile.total_views + 1)
        )

    def author_profile(self, analysis: SportAnalysis) -> Optional[AnalystProfile]:
        return self._session.execute(
            select(AnalystProfile).where(AnalystProfile.user_id == analysis.author_id)
        ).scalar_one_or_none()

    # ── 내부 ─────────────────────────────────────────────────

    def _published(self):
        return select(SportAnalysis).where(
            SportAnalysis.is_published.is_(True),
            SportAnalysis.status == AnalysisStatus.PUBLISHED.value,
        )

    def _find_by_seo_slug(self, seo_slug: str) -> Optional[SportAnalysis]:
        variants = (seo_slug, f"/{seo_slug}", f"analysis/{seo_slug}")
        return self._session.execute(
            self._published()
            .where(SportAnalysis.seo_slug.in_(variants))
            .order_by(SportAnalysis.id)
            .limit(1)
        ).scalar_one_or_none()

    def _find_by_legacy_slug(self, slug: str) -> Optional[SportAnalysis]:
        return self._session.execute(
            self._published().where(SportAnalysis.slug == slug)
        ).scalar_one_or_none()
