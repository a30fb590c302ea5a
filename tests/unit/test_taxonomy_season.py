"""Unit tests for match date and season helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from taxonomy.season import match_datetime, match_day, season_for


class TestSeasonFor:
    """Tests for the August season boundary."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2025, 7, 31), "2024/25"),
            (date(2025, 8, 1), "2025/26"),
            (date(2026, 1, 10), "2025/26"),
            (date(2025, 12, 31), "2025/26"),
            (date(1999, 9, 1), "1999/00"),
        ],
    )
    def test_boundaries(self, day: date, expected: str) -> None:
        """Months from August start a new season."""
        assert season_for(day) == expected


class TestMatchDay:
    """Tests for time zone normalization."""

    def test_aware_datetime_is_converted(self) -> None:
        """Aware datetimes are converted to the configured zone."""
        kickoff = datetime(2025, 8, 31, 23, 30, tzinfo=timezone.utc)

        assert match_day(kickoff, "UTC") == date(2025, 8, 31)
        assert match_day(kickoff, "Asia/Seoul") == date(2025, 9, 1)

    def test_offset_is_respected(self) -> None:
        """A non-UTC offset is normalized to UTC."""
        kickoff = datetime(2025, 9, 1, 1, 0, tzinfo=timezone(timedelta(hours=9)))

        assert match_day(kickoff, "UTC") == date(2025, 8, 31)

    def test_naive_datetime_is_taken_as_local(self) -> None:
        """Naive datetimes are already in the configured zone."""
        assert match_day(datetime(2025, 8, 31, 23, 30), "Asia/Seoul") == date(2025, 8, 31)

    def test_plain_date(self) -> None:
        """Plain dates are used as-is."""
        assert match_day(date(2025, 8, 16)) == date(2025, 8, 16)

    def test_rejects_strings(self) -> None:
        """Only date values are accepted."""
        with pytest.raises(TypeError):
            match_day("2025-08-16")  # type: ignore[arg-type]


class TestMatchDatetime:
    """Tests for the stored kick-off value."""

    def test_naive_gets_zone(self) -> None:
        """Naive values get the configured zone attached."""
        value = match_datetime(datetime(2025, 8, 16, 19, 30), "UTC")

        assert value.tzinfo is not None
        assert value.utcoffset() == timedelta(0)

    def test_date_becomes_midnight(self) -> None:
        """Dates become midnight in the configured zone."""
        assert match_datetime(date(2025, 8, 16), "UTC") == datetime(2025, 8, 16, tzinfo=timezone.utc)

    def test_aware_is_unchanged(self) -> None:
        """Aware values are stored unchanged."""
        kickoff = datetime(2025, 8, 16, 19, 30, tzinfo=timezone(timedelta(hours=2)))

        assert match_datetime(kickoff, "UTC") is kickoff
