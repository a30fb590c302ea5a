"""Unit tests for the static taxonomy tables."""

import pytest

from taxonomy.tables import DEFAULT_SPORT_ICON, UNKNOWN_COUNTRY, TaxonomyTables


class TestTaxonomyTables:
    """Tests for label, icon and country lookups."""

    def test_country_for_league(self) -> None:
        """League names map to ISO country codes by fragment."""
        tables = TaxonomyTables.default()

        assert tables.country_for_league("Premier League") == "GB"
        assert tables.country_for_league("K League 1") == "KR"
        assert tables.country_for_league("K리그1") == "KR"
        assert tables.country_for_league("Eredivisie") == UNKNOWN_COUNTRY

    def test_first_fragment_wins(self) -> None:
        """Country fragments are checked in order."""
        tables = TaxonomyTables(league_countries=(("League", "AA"), ("Premier", "BB")))

        assert tables.country_for_league("Premier League") == "AA"

    def test_icons(self) -> None:
        """Unknown sports get the default icon."""
        tables = TaxonomyTables.default()

        assert tables.sport_icon("soccer") == "⚽"
        assert tables.sport_icon("curling") == DEFAULT_SPORT_ICON

    def test_labels(self) -> None:
        """Labels are optional."""
        tables = TaxonomyTables.default()

        assert tables.sport_label("baseball") == "야구"
        assert tables.league_label("premier-league") == "프리미어리그"
        assert tables.league_label("eredivisie") is None

    def test_suffixes_by_domain(self) -> None:
        """Only leagues and teams strip suffixes."""
        tables = TaxonomyTables.default()

        assert tables.suffixes_for("sport") == ()
        assert "FC" in tables.suffixes_for("league")
        assert "City" in tables.suffixes_for("team")
        assert "City" not in tables.suffixes_for("league")

    @pytest.mark.parametrize(
        "aliases",
        [
            {"team_aliases": {"Derby": "seoul-vs-busan"}},
            {"team_aliases": {"Spurs": "Tottenham Hotspur"}},
            {"league_aliases": {"EPL": "premier--league"}},
            {"sport_aliases": {"Soccer": ""}},
        ],
    )
    def test_invalid_alias_slugs_rejected(self, aliases: dict) -> None:
        """Alias targets must already be valid slugs, and team slugs carry no vs token."""
        with pytest.raises(ValueError):
            TaxonomyTables(**aliases)

    def test_vs_allowed_outside_teams(self) -> None:
        """Only team aliases are checked for the vs token."""
        tables = TaxonomyTables(league_aliases={"Versus Cup": "vs-cup"})

        assert tables.league_aliases["Versus Cup"] == "vs-cup"
