"""
seo/url.py — 계층형 SEO 분석글 경로 생성·해석

신규 형식:
    /analysis/{sport}/{league}/{YYYY}/{MM}/{home}-vs-{away}
    /analysis/soccer/premier-league/2025/08/liverpool-vs-bournemouth

레거시 형식 (하위 호환):
    /analysis/{YYYY-MM-DD}-{home}-vs-{away}[-{n}]
    /analysis/2025-08-16-liverpool-vs-bournemouth-1

YYYY/MM 은 taxonomy.season.match_day() 와 같은 MATCH_TIMEZONE 기준입니다.

sport_analyses.seo_slug 에는 앞의 '/analysis/' 를 뺀 나머지를 저장합니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from taxonomy.season import MatchDate, match_day

ANALYSIS_PREFIX = "/analysis/"
MATCH_SEPARATOR = "-vs-"

_SEO_PATH_RE = re.compile(
    r"/analysis/([^/]+)/([^/]+)/([0-9]{4})/([0-9]{2})/([^/]+)"
)
_LEGACY_PATH_RE = re.compile(
    r"/analysis/([0-9]{4}-[0-9]{2}-[0-9]{2}-[a-z0-9]+(?:-[a-z0-9]+)*)"
)


@dataclass(frozen=True)
class SeoUrlComponents:
    """generate() 입력."""

    sport_slug:     str
    league_slug:    str
    match_date:     MatchDate
    home_team_slug: str
    away_team_slug: str


@dataclass(frozen=True)
class ParsedSeoUrl:
    """parse() 결과. year / month 는 경로에 적힌 그대로의 문자열 ('2025', '08')."""

    sport:      str
    league:     str
    year:       str
    month:      str
    match_slug: str
    home_team:  str
    away_team:  str

    def to_dict(self) -> dict[str, str]:
        return {
            "sport":     self.sport,
            "league":    self.league,
            "year":      self.year,
            "month":     self.month,
            "matchSlug": self.match_slug,
            "homeTeam":  self.home_team,
            "awayTeam":  self.away_team,
        }


# ─────────────────────────────────────────────────────────────
# 신규 계층형 경로
# ─────────────────────────────────────────────────────────────

def generate(components: SeoUrlComponents, tz_name: Optional[str] = None) -> str:
    """
    SEO 경로를 만듭니다.

    Raises:
        ValueError: slug 가 비어 있거나 '/' 를 포함할 때
    """
    slugs = (
        components.sport_slug,
        components.league_slug,
        components.home_team_slug,
        components.away_team_slug,
    )
    for slug in slugs:
        if not slug or "/" in slug:
            raise ValueError(f"SEO 경로에 쓸 수 없는 slug: {slug!r}")

    day = match_day(components.match_date, tz_name)
    return (
        f"{ANALYSIS_PREFIX}{components.sport_slug}/{components.league_slug}/"
        f"{day.year:04d}/{day.month:02d}/"
        f"{components.home_team_slug}{MATCH_SEPARATOR}{components.away_team_slug}"
    )


def parse(path: Any) -> Optional[ParsedSeoUrl]:
    """
    SEO 경로를 구성 요소로 분해합니다. 형식이 맞지 않으면 None (예외 없음).

    경기 세그먼트가 '-vs-' 로 정확히 두 개의 비어 있지 않은 팀 slug 로
    나뉘지 않는 경우도 None 입니다.
    """
    if not isinstance(path, str):
        return None

    match = _SEO_PATH_RE.fullmatch(path)
    if match is None:
        return None

    sport, league, year, month, match_slug = match.groups()
    teams = match_slug.split(MATCH_SEPARATOR)
    if len(teams) != 2 or not all(teams):
        return None

    return ParsedSeoUrl(
        sport      = sport,
        league     = league,
        year       = year,
        month      = month,
        match_slug = match_slug,
        home_team  = teams[0],
        away_team  = teams[1],
    )


# ─────────────────────────────────────────────────────────────
# 레거시 경로 / seo_slug 변환
# ─────────────────────────────────────────────────────────────

def legacy_path(slug: str) -> str:
    return f"{ANALYSIS_PREFIX}{slug}"


def parse_legacy_path(path: Any) -> Optional[str]:
    """레거시 경로면 slug 를, 아니면 None 을 반환합니다."""
    if not isinstance(path, str):
        return None
    match = _LEGACY_PATH_RE.fullmatch(path)
    if match is None or MATCH_SEPARATOR not in match.group(1):
        return None
    return match.group(1)


def seo_slug_from_path(path: str) -> str:
    """'/analysis/soccer/...' → 'soccer/...'"""
    if path.startswith(ANALYSIS_PREFIX):
        return path[len(ANALYSIS_PREFIX):]
    return path.lstrip("/")


def path_from_seo_slug(seo_slug: str) -> str:
    """
    저장된 seo_slug → 경로.

    과거 데이터의 변형('/soccer/...', 'analysis/soccer/...') 도 같은 경로로 정규화합니다.
    """
    rest = seo_slug.lstrip("/")
    if rest.startswith("analysis/"):
        rest = rest[len("analysis/"):]
    return f"{ANALYSIS_PREFIX}{rest}"
