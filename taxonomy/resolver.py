"""
taxonomy/resolver.py — Sport / League / Team / 시즌 소속 find-or-create

처리 순서 (호출자 트랜잭션 안에서):
    Sport  →  League(sport 범위)  →  HomeTeam / AwayTeam  →  TeamLeagueSeason

    - slug 로 조회 → 있으면 그대로 재사용 (먼저 만든 쪽이 이김, 필드 덮어쓰지 않음)
    - 없으면 생성. 생성은 SAVEPOINT 안에서 수행되며,
      유니크 제약 충돌 시 SAVEPOINT 만 롤백하고 승자 행을 딱 한 번 재조회합니다.
      재조회도 실패하면 TaxonomyConflictError.

사용법:
    with session_scope(factory) as session:
        resolver = TaxonomyResolver(TaxonomyStore(session))
        resolved = resolver.resolve("축구", "EPL", "Liverpool FC", "AFC Bournemouth", match_date)
        resolved.league.slug   # "premier-league"
        resolved.season        # "2025/26"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError

from core.logger import Phase, log_context
from database.models import League, Sport, Team
from taxonomy.errors import TaxonomyConflictError
from taxonomy.season import MatchDate, match_day, season_for
from taxonomy.slug import SlugCodec
from taxonomy.store import TaxonomyStore
from taxonomy.tables import TaxonomyTables

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolvedTaxonomy:
    """resolve() 결과. 모든 엔티티는 호출자 세션에 속한 ORM 객체입니다."""

    sport:     Sport
    league:    League
    home_team: Team
    away_team: Team
    season:    str


def _keywords(text: str, slug: str) -> list[str]:
    return list(dict.fromkeys(k for k in (text, slug) if k))


class TaxonomyResolver:
    """
    Args:
        store:  열린 세션에 묶인 TaxonomyStore
        codec:  slug 변환기 (없으면 tables 로 생성)
        tables: 라벨·국가·아이콘 테이블 (없으면 codec 의 테이블 또는 기본값)
        tz_name: 시즌 계산 기준 타임존 (기본: settings.MATCH_TIMEZONE).
                 SEO 경로·레거시 slug 와 같은 값을 넘겨야 함
    """

    def __init__(
        self,
        store:   TaxonomyStore,
        codec:   Optional[SlugCodec]       = None,
        tables:  Optional[TaxonomyTables]  = None,
        tz_name: Optional[str]             = None,
    ) -> None:
        self._store   = store
        self._tables  = tables or (codec.tables if codec else TaxonomyTables.default())
        self._codec   = codec or SlugCodec(self._tables)
        self._tz_name = tz_name

    # ── 공개 API ──────────────────────────────────────────────

    def resolve(
        self,
        sport_text:     str,
        league_text:    str,
        home_team_text: str,
        away_team_text: str,
        match_date:     MatchDate,
    ) -> ResolvedTaxonomy:
        season = season_for(match_day(match_date, self._tz_name))

        with log_context(phase=Phase.TAXONOMY):
            sport  = self.resolve_sport(sport_text)
            league = self.resolve_league(sport, league_text, season)
            home   = self.resolve_team(sport, league, home_team_text)
            away   = self.resolve_team(sport, league, away_team_text)

            for team in {home.id: home, away.id: away}.values():
                # 다른 종목에서 재사용된 팀은 이 리그 소속으로 만들지 않음
                if team.sport_id == league.sport_id:
                    self.ensure_membership(team, league, season)

        logger.info(
            "분류 체계 해석 완료",
            sport=sport.slug, league=league.slug,
            home=home.slug, away=away.slug, season=season,
        )
        return ResolvedTaxonomy(sport=sport, league=league, home_team=home, away_team=away, season=season)

    def resolve_sport(self, text: str) -> Sport:
        slug = self._codec.sport_slug(text)
        return self._find_or_create(
            "Sport", slug,
            find   = lambda: self._store.find_sport(slug),
            create = lambda: self._store.create(Sport(
                slug     = slug,
                name_en  = text.strip(),
                name_ko  = self._tables.sport_label(slug) or text.strip(),
                icon     = self._tables.sport_icon(slug),
                keywords = _keywords(text.strip(), slug),
            )),
        )

    def resolve_league(self, sport: Sport, text: str, season: str) -> League:
        slug = self._codec.league_slug(text)
        name = text.strip()
        return self._find_or_create(
            "League", slug,
            find   = lambda: self._store.find_league(sport.id, slug),
            create = lambda: self._store.create(League(
                slug           = slug,
                sport_id       = sport.id,
                name_en        = name,
                name_ko        = self._tables.league_label(slug) or name,
                country        = self._tables.country_for_league(name),
                current_season = season,
                keywords       = _keywords(name, slug),
            )),
        )

    def resolve_team(self, sport: Sport, league: League, text: str) -> Team:
        slug = self._codec.team_slug(text)
        name = text.strip()
        team = self._find_or_create(
            "Team", slug,
            find   = lambda: self._store.find_team(slug),
            create = lambda: self._store.create(Team(
                slug     = slug,
                sport_id = sport.id,
                name_en  = name,
                name_ko  = name,
                country  = league.country,
                keywords = _keywords(name, slug),
            )),
        )
        if team.sport_id != sport.id:
            # 팀 slug 는 전역 유니크: 다른 종목의 같은 이름 팀을 재사용 (시즌 소속은 생략)
            logger.warning(
                "다른 종목의 팀 slug 재사용 — 시즌 소속 생략",
                slug=slug, team_sport_id=team.sport_id, sport_id=sport.id,
            )
        return team

    def ensure_membership(self, team: Team, league: League, season: str) -> None:
        """팀의 (리그, 시즌) 소속 행이 없으면 생성합니다. 이미 있으면 아무것도 하지 않습니다."""
        self._find_or_create(
            "TeamLeagueSeason", f"{team.slug}@{league.slug}:{season}",
            find   = lambda: self._store.find_association(team.id, league.id, season),
            create = lambda: self._store.create_association(team.id, league.id, season),
        )

    # ── 내부 ─────────────────────────────────────────────────

    def _find_or_create(
        self,
        entity: str,
        slug:   str,
        find:   Callable[[], Optional[T]],
        create: Callable[[], T],
    ) -> T:
        found = find()
        if found is not None:
            return found

        try:
            created = create()
        except IntegrityError as exc:
            # 동시 발행 경합. 다른 트랜잭션이 먼저 만든 행을 한 번만 재조회
            logger.info("생성 충돌 — 승자 행 재조회", entity=entity, slug=slug)
            winner = find()
            if winner is None:
                raise TaxonomyConflictError(entity, slug) from exc
            return winner

        logger.info("분류 체계 생성", entity=entity, slug=slug)
        return created
