"""
taxonomy/store.py — 분류 체계 저장소 (SQLAlchemy Session 래퍼)

TaxonomyResolver / PublicationService 가 사용하는 조회·생성 연산만 노출합니다.
트랜잭션 경계(commit / rollback) 는 호출자의 session_scope() 가 담당하고,
create 계열은 SAVEPOINT 안에서 flush 하여 유니크 제약 충돌이 나도
바깥 트랜잭션은 살아 있게 합니다.
"""

from __future__ import annotations

import logging
from typing import Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from database.models import League, SportAnalysis, Sport, Team, TeamLeagueSeason

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", Sport, League, Team, TeamLeagueSeason)


class TaxonomyStore:
    """열린 Session 하나에 묶인 저장소. 인스턴스는 요청(트랜잭션) 단위로 만듭니다."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    # ── 조회 ─────────────────────────────────────────────────

    def find_sport(self, slug: str) -> Optional[Sport]:
        return self._session.execute(
            select(Sport).where(Sport.slug == slug)
        ).scalar_one_or_none()

    def find_league(self, sport_id: int, slug: str) -> Optional[League]:
        return self._session.execute(
            select(League).where(League.sport_id == sport_id, League.slug == slug)
        ).scalar_one_or_none()

    def find_team(self, slug: str) -> Optional[Team]:
        return self._session.execute(
            select(Team).where(Team.slug == slug)
        ).scalar_one_or_none()

    def find_association(
        self, team_id: int, league_id: int, season: str,
    ) -> Optional[TeamLeagueSeason]:
        return self._session.execute(
            select(TeamLeagueSeason).where(
                TeamLeagueSeason.team_id   == team_id,
                TeamLeagueSeason.league_id == league_id,
                TeamLeagueSeason.season    == season,
            )
        ).scalar_one_or_none()

    def analysis_slug_exists(self, slug: str) -> bool:
        return self._session.execute(
            select(SportAnalysis.id).where(SportAnalysis.slug == slug).limit(1)
        ).first() is not None

    # ── 생성 ─────────────────────────────────────────────────

    def create(self, entity: EntityT) -> EntityT:
        """
        SAVEPOINT 안에서 INSERT 후 flush 합니다.

        Raises:
            sqlalchemy.exc.IntegrityError: 유니크 제약 충돌. SAVEPOINT 만 롤백된 상태로 전파.
        """
        with self._session.begin_nested():
            self._session.add(entity)
            self._session.flush()
        logger.debug("분류 체계 행 생성: %r", entity)
        return entity

    def create_association(self, team_id: int, league_id: int, season: str) -> TeamLeagueSeason:
        return self.create(TeamLeagueSeason(team_id=team_id, league_id=league_id, season=season))
