"""
publishing/service.py — 분석글 발행 오케스트레이터

트랜잭션 하나 안에서:
  1. 분류 체계 해석        TaxonomyResolver.resolve()
  2. 레거시 slug 할당      slugify_text("날짜-홈-vs-원정") → allocate()
  3. SEO 경로 생성         seo.url.generate() → seo_slug 저장
  4. 분석글 + 예측 INSERT  status=PUBLISHED
  5. 분석가 예측 수 누적   analyst_profiles.total_predictions += len(predictions)

어느 단계든 실패하면 전체 롤백 후 PublishFailed 로 전달됩니다.

사용법:
    service = PublicationService(get_session_factory())
    result  = service.publish(draft, author_id=7)
    result.seo_url   # "/analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import update
from sqlalchemy.orm import Session, sessionmaker

from core.config import settings
from core.db import session_scope
from core.logger import Phase, log_context
from database.models import AnalysisPrediction, AnalysisStatus, AnalystProfile, SportAnalysis
from publishing.errors import AuthorProfileMissing, PublishFailed
from publishing.models import AnalysisDraft
from seo.url import SeoUrlComponents, generate, seo_slug_from_path
from taxonomy.allocator import allocate
from taxonomy.resolver import ResolvedTaxonomy, TaxonomyResolver
from taxonomy.season import match_datetime, match_day
from taxonomy.slug import LEGACY_SLUG_MAX_LENGTH, SlugCodec, slugify_text
from taxonomy.store import TaxonomyStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PublishResult:
    """발행 결과. analysis 는 커밋 후 분리(detached)된 ORM 객체입니다 (컬럼·predictions 로드됨)."""

    analysis: SportAnalysis
    seo_url:  str


class PublicationService:
    """
    Args:
        session_factory: 트랜잭션마다 세션을 여는 sessionmaker
        codec:           slug 변환기 (없으면 기본 테이블)
        max_suffix:      레거시 slug 접미사 최대 시도 (기본: settings.SLUG_MAX_SUFFIX)
        tz_name:         URL·시즌 기준 타임존 (기본: settings.MATCH_TIMEZONE)
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        codec:           Optional[SlugCodec] = None,
        max_suffix:      Optional[int]       = None,
        tz_name:         Optional[str]       = None,
    ) -> None:
        self._factory    = session_factory
        self._codec      = codec or SlugCodec()
        self._max_suffix = max_suffix
        self._tz_name    = tz_name

    # ── 공개 API ──────────────────────────────────────────────

    def publish(self, draft: AnalysisDraft, author_id: int) -> PublishResult:
        with log_context(author_id=author_id, phase=Phase.PUBLISH):
            logger.info(
                "분석글 발행 시작",
                sport=draft.sport_type, league=draft.league,
                home=draft.home_team, away=draft.away_team,
            )
            try:
                with session_scope(self._factory) as session:
                    result = self._publish_in(session, draft, author_id)
            except PublishFailed as exc:
                logger.warning("분석글 발행 실패", error=str(exc))
                raise
            except Exception as exc:
                logger.error("분석글 발행 실패 — 롤백", error_type=type(exc).__name__, error=str(exc))
                raise PublishFailed(f"분석글 발행 실패: {exc}") from exc

            logger.info(
                "분석글 발행 완료",
                analysis_id=result.analysis.id,
                slug=result.analysis.slug,
                seo_url=result.seo_url,
            )
            return result

    # ── 트랜잭션 본문 ─────────────────────────────────────────

    def _publish_in(self, session: Session, draft: AnalysisDraft, author_id: int) -> PublishResult:
        store    = TaxonomyStore(session)
        resolver = TaxonomyResolver(store, self._codec, tz_name=self._tz_name)

        resolved = resolver.resolve(
            draft.sport_type, draft.league, draft.home_team, draft.away_team, draft.match_date,
        )

        with log_context(phase=Phase.SLUG):
            slug = self._legacy_slug(store, draft)
            seo_url = self._seo_url(resolved, draft)

        analysis = self._insert_analysis(session, draft, author_id, resolved, slug, seo_url)

        with log_context(analysis_id=analysis.id):
            self._insert_predictions(session, analysis, draft, author_id)
            self._count_predictions(session, author_id, len(draft.predictions))

        return PublishResult(analysis=analysis, seo_url=seo_url)

    def _legacy_slug(self, store: TaxonomyStore, draft: AnalysisDraft) -> str:
        max_suffix = self._max_suffix
        if max_suffix is None:
            max_suffix = settings.SLUG_MAX_SUFFIX

        # 가장 긴 접미사 '-{max_suffix}' 가 붙어도 컬럼 길이를 넘지 않게 미리 자름
        limit = LEGACY_SLUG_MAX_LENGTH - len(f"-{max_suffix}")
        day   = match_day(draft.match_date, self._tz_name)
        base  = slugify_text(f"{day.isoformat()}-{draft.home_team}-vs-{draft.away_team}", limit)
        return allocate(base, store.analysis_slug_exists, max_suffix)

    def _seo_url(self, resolved: ResolvedTaxonomy, draft: AnalysisDraft) -> str:
        return generate(
            SeoUrlComponents(
                sport_slug     = resolved.sport.slug,
                league_slug    = resolved.league.slug,
                match_date     = draft.match_date,
                home_team_slug = resolved.home_team.slug,
                away_team_slug = resolved.away_team.slug,
            ),
            self._tz_name,
        )

    def _insert_analysis(
        self,
        session:   Session,
        draft:     AnalysisDraft,
        author_id: int,
        resolved:  ResolvedTaxonomy,
        slug:      str,
        seo_url:   str,
    ) -> SportAnalysis:
        analysis = SportAnalysis(
            author_id    = author_id,
            slug         = slug,
            seo_slug     = seo_slug_from_path(seo_url),

            sport_id     = resolved.sport.id,
            league_id    = resolved.league.id,
            home_team_id = resolved.home_team.id,
            away_team_id = resolved.away_team.id,

            match_date   = match_datetime(draft.match_date, self._tz_name),
            sport_type   = draft.sport_type,
            league       = draft.league,
            competition  = draft.competition,
            home_team    = draft.home_team,
            away_team    = draft.away_team,

            title            = draft.title,
            meta_description = draft.meta_description,
            meta_keywords    = list(draft.meta_keywords),

            home_formation     = draft.home_formation,
            away_formation     = draft.away_formation,
            home_analysis      = draft.home_analysis,
            away_analysis      = draft.away_analysis,
            tactical_analysis  = draft.tactical_analysis,
            key_players        = draft.key_players,
            injury_info        = draft.injury_info,
            head_to_head       = draft.head_to_head,
            recent_form        = draft.recent_form,
            prediction_summary = draft.prediction_summary,
            confidence_level   = draft.confidence_level,

            status       = AnalysisStatus.PUBLISHED.value,
            is_published = True,
            published_at = datetime.now(timezone.utc),
            views        = 0,
        )
        session.add(analysis)
        session.flush()
        return analysis

    def _insert_predictions(
        self,
        session:   Session,
        analysis:  SportAnalysis,
        draft:     AnalysisDraft,
        author_id: int,
    ) -> None:
        for item in draft.predictions:
            analysis.predictions.append(
                AnalysisPrediction(
                    author_id  = author_id,
                    bet_type   = item.bet_type.value,
                    prediction = item.prediction,
                    odds       = item.odds,
                    stake      = item.stake,
                    reasoning  = item.reasoning,
                )
            )
        session.flush()

    @staticmethod
    def _count_predictions(session: Session, author_id: int, count: int) -> None:
        updated = session.execute(
            update(AnalystProfile)
            .where(AnalystProfile.user_id == author_id)
            .values(total_predictions=AnalystProfile.total_predictions + count)
        ).rowcount
        if not updated:
            raise AuthorProfileMissing(author_id)
