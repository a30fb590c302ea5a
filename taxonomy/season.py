"""
taxonomy/season.py — 경기일 기준 날짜·시즌 계산

SEO URL 의 연/월, 리그 시즌, 레거시 slug 의 날짜는 모두 match_day() 하나로
계산해야 서로 어긋나지 않습니다.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

MatchDate = Union[datetime, date]

# 8월부터 새 시즌 (유럽 축구 기준)
SEASON_START_MONTH = 8


def _zone(tz_name: Optional[str]) -> tzinfo:
    if tz_name is None:
        from core.config import settings
        tz_name = settings.MATCH_TIMEZONE
    if tz_name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(tz_name)


def match_day(value: MatchDate, tz_name: Optional[str] = None) -> date:
    """
    경기 일시를 MATCH_TIMEZONE 기준 날짜로 변환합니다.

    - aware datetime: 기준 타임존으로 변환 후 날짜
    - naive datetime: 이미 기준 타임존 값으로 간주
    - date: 그대로
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(_zone(tz_name)).date()
    if isinstance(value, date):
        return value
    raise TypeError(f"경기 일시는 datetime 또는 date 여야 합니다: {type(value).__name__}")


def match_datetime(value: MatchDate, tz_name: Optional[str] = None) -> datetime:
    """저장용 aware datetime. naive 값과 date 는 기준 타임존 시각으로 간주합니다."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=_zone(tz_name))
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=_zone(tz_name))
    raise TypeError(f"경기 일시는 datetime 또는 date 여야 합니다: {type(value).__name__}")


def season_for(day: date) -> str:
    """
    'YYYY/YY' 시즌 문자열. 8월 이후는 그 해 시작 시즌, 그 전은 전년도 시작 시즌.

        2025-07-31 → 2024/25
        2025-08-01 → 2025/26
    """
    start = day.year if day.month >= SEASON_START_MONTH else day.year - 1
    return f"{start}/{(start + 1) % 100:02d}"
