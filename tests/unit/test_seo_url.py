"""Unit tests for the SEO URL codec."""

from datetime import date, datetime, timezone

import pytest

from seo.url import (
    ParsedSeoUrl,
    SeoUrlComponents,
    generate,
    legacy_path,
    parse,
    parse_legacy_path,
    path_from_seo_slug,
    seo_slug_from_path,
)

EXAMPLE_PATH = "/analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth"


@pytest.fixture
def components() -> SeoUrlComponents:
    """Components of the example fixture."""
    return SeoUrlComponents(
        sport_slug="soccer",
        league_slug="premier-league",
        match_date=date(2025, 8, 16),
        home_team_slug="liverpool",
        away_team_slug="bournemouth",
    )


class TestGenerate:
    """Tests for path generation."""

    def test_example(self, components: SeoUrlComponents) -> None:
        """The documented example is produced exactly."""
        assert generate(components) == EXAMPLE_PATH

    def test_month_is_zero_padded(self) -> None:
        """Single-digit months are padded to two digits."""
        path = generate(
            SeoUrlComponents("baseball", "kbo", datetime(2025, 3, 2, 18, 30), "lg-twins", "doosan-bears"),
            "UTC",
        )

        assert path == "/analysis/baseball/kbo/2025/03/lg-twins-vs-doosan-bears"

    def test_uses_configured_zone(self) -> None:
        """Year and month follow the configured time zone."""
        late = SeoUrlComponents(
            "soccer", "k-league-1", datetime(2025, 12, 31, 16, 0, tzinfo=timezone.utc), "ulsan", "pohang",
        )

        assert generate(late, "UTC").startswith("/analysis/soccer/k-league-1/2025/12/")
        assert generate(late, "Asia/Seoul").startswith("/analysis/soccer/k-league-1/2026/01/")

    @pytest.mark.parametrize("bad", ["", "a/b"])
    def test_rejects_unusable_slugs(self, components: SeoUrlComponents, bad: str) -> None:
        """Empty slugs or slugs with a slash cannot form a path."""
        broken = SeoUrlComponents(bad, components.league_slug, components.match_date, "a", "b")

        with pytest.raises(ValueError):
            generate(broken)


class TestParse:
    """Tests for the inverse parser."""

    def test_example(self) -> None:
        """The example path parses into its components."""
        assert parse(EXAMPLE_PATH) == ParsedSeoUrl(
            sport="soccer",
            league="premier-league",
            year="2025",
            month="08",
            match_slug="liverpool-vs-bournemouth",
            home_team="liverpool",
            away_team="bournemouth",
        )

    def test_round_trip(self, components: SeoUrlComponents) -> None:
        """Parsing a generated path gives back the inputs."""
        parsed = parse(generate(components))

        assert parsed is not None
        assert (parsed.sport, parsed.league) == (components.sport_slug, components.league_slug)
        assert (int(parsed.year), int(parsed.month)) == (2025, 8)
        assert (parsed.home_team, parsed.away_team) == ("liverpool", "bournemouth")

    @pytest.mark.parametrize(
        "path",
        [
            "/analysis/soccer/premier-league/2025/8/liverpool-vs-bournemouth",
            "/analysis/soccer/premier-league/25/08/liverpool-vs-bournemouth",
            "/analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth/",
            "/analysis/soccer/premier-league/2025/08",
            "/analysis/soccer/premier-league/2025/08/extra/liverpool-vs-bournemouth",
            "analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth",
            "/news/soccer/premier-league/2025/08/liverpool-vs-bournemouth",
            "/analysis/soccer/premier-league/2025/08/liverpool-bournemouth",
            "/analysis/soccer/premier-league/2025/08/a-vs-b-vs-c",
            "/analysis/soccer/premier-league/2025/08/-vs-bournemouth",
            "/analysis/soccer/premier-league/2025/08/liverpool-vs-",
            "",
        ],
    )
    def test_rejects_malformed(self, path: str) -> None:
        """Structural mismatches give None."""
        assert parse(path) is None

    @pytest.mark.parametrize("value", [None, 123, b"/analysis/a/b/2025/08/c-vs-d", ["/analysis"]])
    def test_non_string_input(self, value: object) -> None:
        """Non-string input gives None instead of raising."""
        assert parse(value) is None

    def test_to_dict(self) -> None:
        """The parsed form serializes with camelCase keys."""
        parsed = parse(EXAMPLE_PATH)

        assert parsed is not None
        assert parsed.to_dict()["matchSlug"] == "liverpool-vs-bournemouth"
        assert parsed.to_dict()["homeTeam"] == "liverpool"


class TestLegacyPaths:
    """Tests for the legacy flat slug scheme."""

    def test_legacy_path(self) -> None:
        """Legacy slugs live directly under /analysis/."""
        assert legacy_path("2025-08-16-liverpool-vs-bournemouth") == "/analysis/2025-08-16-liverpool-vs-bournemouth"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/analysis/2025-08-16-liverpool-vs-bournemouth", "2025-08-16-liverpool-vs-bournemouth"),
            ("/analysis/2025-08-16-liverpool-fc-vs-bournemouth-2", "2025-08-16-liverpool-fc-vs-bournemouth-2"),
            ("/analysis/2025-08-16-liverpool-bournemouth", None),
            ("/analysis/liverpool-vs-bournemouth", None),
            (EXAMPLE_PATH, None),
            (None, None),
        ],
    )
    def test_parse_legacy_path(self, path: object, expected: str | None) -> None:
        """Only dated slugs with a -vs- separator are legacy paths."""
        assert parse_legacy_path(path) == expected


class TestSeoSlug:
    """Tests for the stored seo_slug form."""

    def test_strip_prefix(self) -> None:
        """The stored slug drops the /analysis/ prefix."""
        assert seo_slug_from_path(EXAMPLE_PATH) == "soccer/premier-league/2025/08/liverpool-vs-bournemouth"

    def test_already_stripped(self) -> None:
        """A slug without the prefix only loses a leading slash."""
        assert seo_slug_from_path("/soccer/x") == "soccer/x"

    @pytest.mark.parametrize(
        "stored",
        [
            "soccer/premier-league/2025/08/liverpool-vs-bournemouth",
            "/soccer/premier-league/2025/08/liverpool-vs-bournemouth",
            "analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth",
        ],
    )
    def test_path_from_stored_variants(self, stored: str) -> None:
        """All stored variants map back to the same path."""
        assert path_from_seo_slug(stored) == EXAMPLE_PATH
