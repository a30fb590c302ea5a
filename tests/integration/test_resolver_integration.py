"""Integration tests for taxonomy find-or-create against a real database."""

from datetime import datetime, timezone
from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from core.db import session_scope
from database.models import League, Sport, Team, TeamLeagueSeason
from taxonomy.errors import TaxonomyConflictError
from taxonomy.resolver import TaxonomyResolver
from taxonomy.store import TaxonomyStore


def resolve(factory: sessionmaker, *args: Any) -> dict[str, Any]:
    """Resolve in its own transaction and return plain values."""
    with session_scope(factory) as session:
        resolved = TaxonomyResolver(TaxonomyStore(session)).resolve(*args)
        return {
            "sport": resolved.sport.id,
            "league": resolved.league.id,
            "home": resolved.home_team.id,
            "away": resolved.away_team.id,
            "season": resolved.season,
            "league_slug": resolved.league.slug,
            "country": resolved.league.country,
            "home_slug": resolved.home_team.slug,
        }


def count(factory: sessionmaker, model: type) -> int:
    """Row count of a table."""
    with session_scope(factory) as session:
        return session.execute(select(func.count()).select_from(model)).scalar_one()


class TestResolve:
    """Tests for the full resolve sequence."""

    def test_creates_taxonomy(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """First sight of a match creates every entity."""
        ids = resolve(session_factory, "축구", "Premier League", "Liverpool FC", "Bournemouth", match_date)

        assert ids["league_slug"] == "premier-league"
        assert ids["home_slug"] == "liverpool"
        assert ids["season"] == "2025/26"
        assert ids["country"] == "GB"
        assert count(session_factory, Sport) == 1
        assert count(session_factory, League) == 1
        assert count(session_factory, Team) == 2
        assert count(session_factory, TeamLeagueSeason) == 2

    def test_idempotent(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """Resolving again with other spellings reuses the same rows."""
        first = resolve(session_factory, "축구", "Premier League", "Liverpool FC", "Bournemouth", match_date)
        second = resolve(session_factory, "SOCCER", "EPL", "Liverpool", "bournemouth", match_date)

        assert first == second
        assert count(session_factory, Sport) == 1
        assert count(session_factory, League) == 1
        assert count(session_factory, Team) == 2
        assert count(session_factory, TeamLeagueSeason) == 2

    def test_first_writer_wins(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """Existing rows are never overwritten by later spellings."""
        resolve(session_factory, "축구", "EPL", "Liverpool FC", "Bournemouth", match_date)
        again = resolve(session_factory, "축구", "Premier League", "Liverpool FC", "Bournemouth", match_date)

        assert again["country"] == "XX"
        with session_scope(session_factory) as session:
            league = session.execute(select(League)).scalar_one()
            assert league.name_en == "EPL"
            assert league.name_ko == "프리미어리그"

    def test_unknown_country(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """Leagues without a known country get XX."""
        ids = resolve(session_factory, "축구", "Eredivisie", "Ajax", "PSV", match_date)

        assert ids["country"] == "XX"

    def test_new_season_adds_memberships(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """A later season adds membership rows without new teams."""
        resolve(session_factory, "축구", "EPL", "Liverpool FC", "Bournemouth", match_date)
        later = resolve(
            session_factory, "축구", "EPL", "Liverpool FC", "Bournemouth",
            datetime(2026, 9, 1, tzinfo=timezone.utc),
        )

        assert later["season"] == "2026/27"
        assert count(session_factory, Team) == 2
        assert count(session_factory, TeamLeagueSeason) == 4

    def test_same_team_on_both_sides(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """Names that normalize to one slug give one team and one membership."""
        ids = resolve(session_factory, "축구", "EPL", "Liverpool FC", "Liverpool", match_date)

        assert ids["home"] == ids["away"]
        assert count(session_factory, Team) == 1
        assert count(session_factory, TeamLeagueSeason) == 1

    def test_league_slug_is_scoped_by_sport(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """The same league slug under two sports gives two leagues."""
        soccer = resolve(session_factory, "축구", "Champions", "Ajax", "PSV", match_date)
        volleyball = resolve(session_factory, "배구", "Champions", "Hyundai", "Korean Air", match_date)

        assert soccer["league_slug"] == volleyball["league_slug"] == "champions"
        assert soccer["league"] != volleyball["league"]
        assert count(session_factory, League) == 2

    def test_team_reused_across_sports(self, session_factory: sessionmaker, match_date: datetime) -> None:
        """Team slugs are global, so another sport reuses the team without joining its league."""
        soccer = resolve(session_factory, "축구", "EPL", "Liverpool FC", "Bournemouth", match_date)
        baseball = resolve(session_factory, "야구", "MLB", "Liverpool", "Yankees", match_date)

        assert baseball["home"] == soccer["home"]
        assert count(session_factory, Team) == 3
        assert count(session_factory, TeamLeagueSeason) == 3
        with session_scope(session_factory) as session:
            mlb_members = session.execute(
                select(TeamLeagueSeason.team_id).where(TeamLeagueSeason.league_id == baseball["league"])
            ).scalars().all()
        assert mlb_members == [baseball["away"]]

    @pytest.mark.parametrize(
        ("tz_name", "season"),
        [("UTC", "2024/25"), ("Asia/Seoul", "2025/26")],
    )
    def test_season_uses_configured_zone(
        self, session_factory: sessionmaker, tz_name: str, season: str,
    ) -> None:
        """The season follows the zone the resolver is given."""
        kickoff = datetime(2025, 7, 31, 16, 0, tzinfo=timezone.utc)

        with session_scope(session_factory) as session:
            resolver = TaxonomyResolver(TaxonomyStore(session), tz_name=tz_name)
            resolved = resolver.resolve("축구", "EPL", "Liverpool FC", "Bournemouth", kickoff)
            assert resolved.season == season
            assert resolved.league.current_season == season

        with session_scope(session_factory) as session:
            seasons = session.execute(select(TeamLeagueSeason.season)).scalars().all()
        assert seasons == [season, season]


class TestConflictRetry:
    """Tests for the unique-violation re-read path."""

    def test_losing_insert_rereads_winner(
        self, session_factory: sessionmaker, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A lost race returns the row created by the other writer."""
        with session_scope(session_factory) as session:
            existing = TaxonomyResolver(TaxonomyStore(session)).resolve_sport("soccer").id

        original = TaxonomyStore.find_sport
        calls: list[str] = []

        def stale_first_read(self: TaxonomyStore, slug: str):
            calls.append(slug)
            if len(calls) == 1:
                return None
            return original(self, slug)

        monkeypatch.setattr(TaxonomyStore, "find_sport", stale_first_read)

        with session_scope(session_factory) as session:
            sport = TaxonomyResolver(TaxonomyStore(session)).resolve_sport("축구")
            # outer transaction is still usable after the failed savepoint
            session.execute(select(func.count()).select_from(Sport)).scalar_one()
            resolved_id = sport.id

        assert resolved_id == existing
        assert calls == ["soccer", "soccer"]
        assert count(session_factory, Sport) == 1

    def test_missing_winner_raises(
        self, session_factory: sessionmaker, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """If the re-read still finds nothing the conflict surfaces."""
        with session_scope(session_factory) as session:
            TaxonomyResolver(TaxonomyStore(session)).resolve_sport("soccer")

        monkeypatch.setattr(TaxonomyStore, "find_sport", lambda self, slug: None)

        with pytest.raises(TaxonomyConflictError) as exc_info:
            with session_scope(session_factory) as session:
                TaxonomyResolver(TaxonomyStore(session)).resolve_sport("soccer")

        assert exc_info.value.entity == "Sport"
        assert exc_info.value.slug == "soccer"
