"""Integration tests for path lookup and view counting."""

from typing import Optional

import pytest
from sqlalchemy import select, update
from sqlalchemy.orm import sessionmaker

from core.db import session_scope
from database.models import AnalystProfile, SportAnalysis
from publishing.lookup import AnalysisLookup
from publishing.models import AnalysisDraft
from publishing.service import PublicationService

SEO_PATH = "/analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth"
SEO_SLUG = "soccer/premier-league/2025/08/liverpool-vs-bournemouth"


@pytest.fixture
def published(session_factory: sessionmaker, analyst: int, draft: AnalysisDraft) -> int:
    """Id of one published analysis."""
    return PublicationService(session_factory).publish(draft, analyst).analysis.id


def find(factory: sessionmaker, path: str) -> Optional[int]:
    """Look a path up in its own transaction."""
    with session_scope(factory) as session:
        analysis = AnalysisLookup(session).find_by_path(path)
        return analysis.id if analysis is not None else None


class TestFindByPath:
    """Tests for SEO and legacy resolution."""

    @pytest.mark.parametrize("path", [SEO_PATH, SEO_SLUG, f"/{SEO_SLUG}", f"{SEO_PATH}/"])
    def test_seo_forms(self, session_factory: sessionmaker, published: int, path: str) -> None:
        """Full paths and bare stored slugs both resolve."""
        assert find(session_factory, path) == published

    @pytest.mark.parametrize(
        "path",
        [
            "/analysis/2025-08-16-liverpool-fc-vs-bournemouth",
            "2025-08-16-liverpool-fc-vs-bournemouth",
        ],
    )
    def test_legacy_slug(self, session_factory: sessionmaker, published: int, path: str) -> None:
        """Legacy paths resolve through the flat slug."""
        assert find(session_factory, path) == published

    @pytest.mark.parametrize(
        "path",
        ["/analysis/soccer/premier-league/2025/09/liverpool-vs-bournemouth", "/analysis/nothing-here", "", "/"],
    )
    def test_unknown(self, session_factory: sessionmaker, published: int, path: str) -> None:
        """Unknown paths give None."""
        assert find(session_factory, path) is None

    @pytest.mark.parametrize("stored", [f"/{SEO_SLUG}", f"analysis/{SEO_SLUG}"])
    def test_stored_variants(self, session_factory: sessionmaker, published: int, stored: str) -> None:
        """Older stored seo_slug shapes still resolve."""
        with session_scope(session_factory) as session:
            session.execute(update(SportAnalysis).values(seo_slug=stored))

        assert find(session_factory, SEO_PATH) == published

    def test_first_analysis_wins(
        self, session_factory: sessionmaker, published: int, analyst: int, draft: AnalysisDraft,
    ) -> None:
        """Several analyses of one match resolve to the oldest."""
        PublicationService(session_factory).publish(draft, analyst)

        assert find(session_factory, SEO_PATH) == published

    def test_unpublished_is_hidden(self, session_factory: sessionmaker, published: int) -> None:
        """Drafts are found by neither identifier."""
        with session_scope(session_factory) as session:
            session.execute(update(SportAnalysis).values(status="DRAFT", is_published=False))

        assert find(session_factory, SEO_PATH) is None
        assert find(session_factory, "/analysis/2025-08-16-liverpool-fc-vs-bournemouth") is None


class TestRecordView:
    """Tests for view counters."""

    def test_counts_views(self, session_factory: sessionmaker, published: int, analyst: int) -> None:
        """Each view bumps the analysis and the author totals."""
        for _ in range(2):
            with session_scope(session_factory) as session:
                lookup = AnalysisLookup(session)
                lookup.record_view(lookup.find_by_path(SEO_PATH))

        with session_scope(session_factory) as session:
            assert session.get(SportAnalysis, published).views == 2
            author = session.execute(
                select(AnalystProfile).where(AnalystProfile.user_id == analyst)
            ).scalar_one()
            assert author.total_views == 2

    def test_author_profile(self, session_factory: sessionmaker, published: int) -> None:
        """The author profile is loaded for page metadata."""
        with session_scope(session_factory) as session:
            lookup = AnalysisLookup(session)
            author = lookup.author_profile(lookup.find_by_path(SEO_PATH))
            assert author is not None
            assert author.display_name == "Tactics Lab"
