"""
taxonomy/tables.py — 분류 체계 정적 테이블 (별칭·접미사·국가·라벨·아이콘)

모든 테이블은 읽기 전용 매핑(MappingProxyType) 으로 노출되고,
TaxonomyTables 인스턴스 하나로 묶여 SlugCodec / TaxonomyResolver / 메타데이터
빌더에 생성자 인자로 주입됩니다.

    tables = TaxonomyTables.default()
    codec  = SlugCodec(tables)

운영 중 리그를 추가할 때는 여기의 _LEAGUE_ALIASES / _LEAGUE_LABELS 에
같이 추가합니다. 라벨이 없으면 브레드크럼·한글명이 slug / 원문으로 대체됩니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# ─────────────────────────────────────────────────────────────
# 종목
# ─────────────────────────────────────────────────────────────

# SportType enum 표기(SOCCER ...) 와 한/영 표기를 모두 받습니다.
_SPORT_ALIASES: dict[str, str] = {
    "SOCCER":     "soccer",
    "soccer":     "soccer",
    "축구":       "soccer",
    "football":   "soccer",

    "BASEBALL":   "baseball",
    "baseball":   "baseball",
    "야구":       "baseball",

    "BASKETBALL": "basketball",
    "basketball": "basketball",
    "농구":       "basketball",

    "ESPORTS":    "esports",
    "esports":    "esports",
    "e스포츠":    "esports",
    "e-sports":   "esports",

    "VOLLEYBALL": "volleyball",
    "volleyball": "volleyball",
    "배구":       "volleyball",

    "TENNIS":     "tennis",
    "tennis":     "tennis",
    "테니스":     "tennis",

    "GOLF":       "golf",
    "golf":       "golf",
    "골프":       "golf",
}

_SPORT_LABELS: dict[str, str] = {
    "soccer":     "축구",
    "baseball":   "야구",
    "basketball": "농구",
    "esports":    "e스포츠",
    "volleyball": "배구",
    "tennis":     "테니스",
    "golf":       "골프",
}

_SPORT_ICONS: dict[str, str] = {
    "soccer":     "⚽",
    "baseball":   "⚾",
    "basketball": "🏀",
    "esports":    "🎮",
    "volleyball": "🏐",
    "tennis":     "🎾",
    "golf":       "⛳",
}

DEFAULT_SPORT_ICON = "🏆"

# ─────────────────────────────────────────────────────────────
# 리그
# ─────────────────────────────────────────────────────────────

_LEAGUE_ALIASES: dict[str, str] = {
    "Premier League":               "premier-league",
    "프리미어리그":                 "premier-league",
    "EPL":                          "premier-league",

    "La Liga":                      "la-liga",
    "라리가":                       "la-liga",

    "Serie A":                      "serie-a",
    "세리에A":                      "serie-a",

    "Bundesliga":                   "bundesliga",
    "분데스리가":                   "bundesliga",

    "Ligue 1":                      "ligue-1",
    "리그1":                        "ligue-1",

    "K리그1":                       "k-league-1",
    "K League 1":                   "k-league-1",
    "K리그 클래식":                 "k-league-1",

    "K리그2":                       "k-league-2",
    "K League 2":                   "k-league-2",

    "MLB":                          "mlb",
    "Major League Baseball":        "mlb",
    "메이저리그":                   "mlb",

    "KBO":                          "kbo",
    "KBO 리그":                     "kbo",
    "Korean Baseball Organization": "kbo",

    "NBA":                          "nba",
    "National Basketball Association": "nba",

    "KBL":                          "kbl",
    "Korean Basketball League":     "kbl",
    "한국프로농구":                 "kbl",
}

_LEAGUE_LABELS: dict[str, str] = {
    "premier-league": "프리미어리그",
    "la-liga":        "라리가",
    "serie-a":        "세리에A",
    "bundesliga":     "분데스리가",
    "ligue-1":        "리그1",
    "k-league-1":     "K리그1",
    "k-league-2":     "K리그2",
    "mlb":            "MLB",
    "kbo":            "KBO",
    "nba":            "NBA",
    "kbl":            "KBL",
}

# 리그 이름 부분 문자열 → ISO 3166-1 alpha-2. 위에서부터 처음 일치하는 항목 사용.
_LEAGUE_COUNTRIES: tuple[tuple[str, str], ...] = (
    ("Premier League", "GB"),
    ("La Liga",        "ES"),
    ("Serie A",        "IT"),
    ("Bundesliga",     "DE"),
    ("Ligue 1",        "FR"),
    ("K League",       "KR"),
    ("K리그",          "KR"),
    ("MLB",            "US"),
    ("KBO",            "KR"),
    ("NBA",            "US"),
    ("KBL",            "KR"),
)

UNKNOWN_COUNTRY = "XX"

# ─────────────────────────────────────────────────────────────
# 팀
# ─────────────────────────────────────────────────────────────

# 접미사 제거 후 서로 같은 slug 로 뭉개지는 구단들
_TEAM_ALIASES: dict[str, str] = {
    "Manchester United":   "manchester-united",
    "Man United":          "manchester-united",
    "Man Utd":             "manchester-united",
    "맨체스터 유나이티드": "manchester-united",
    "맨유":                "manchester-united",

    "Manchester City":     "manchester-city",
    "Man City":            "manchester-city",
    "맨체스터 시티":       "manchester-city",
    "맨시티":              "manchester-city",

    "Real Madrid":         "real-madrid",
    "레알 마드리드":       "real-madrid",

    "Atletico Madrid":     "atletico-madrid",
    "Atlético Madrid":     "atletico-madrid",
    "아틀레티코 마드리드": "atletico-madrid",

    "Real Sociedad":       "real-sociedad",
    "Real Betis":          "real-betis",

    "Leicester City":      "leicester-city",
    "Stoke City":          "stoke-city",
    "Norwich City":        "norwich-city",

    "Newcastle United":    "newcastle-united",
    "West Ham United":     "west-ham-united",
    "Leeds United":        "leeds-united",

    "Sporting CP":         "sporting-cp",
    "Athletic Bilbao":     "athletic-bilbao",
    "Athletic Club":       "athletic-bilbao",
}

_LEAGUE_SUFFIXES: tuple[str, ...] = (
    "F.C.", "S.C.", "A.C.", "C.F.",
    "FC", "SC", "AC", "CF",
)

_TEAM_SUFFIXES: tuple[str, ...] = _LEAGUE_SUFFIXES + (
    "United", "City", "Town", "Athletic", "Atletico", "Sporting", "Real",
)


# 별칭 값으로 허용하는 slug: 소문자 영숫자를 '-' 하나로 이은 형태
_ALIAS_SLUG_RE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


# ─────────────────────────────────────────────────────────────
# 주입용 테이블 묶음
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TaxonomyTables:
    """
    분류 체계 정적 설정.

    모든 매핑은 읽기 전용이며 인스턴스는 불변입니다.
    테스트나 다른 데이터셋을 쓰려면 default() 대신 필드를 직접 넘겨 만듭니다.
    """

    sport_aliases:    Mapping[str, str] = field(default_factory=lambda: _frozen(_SPORT_ALIASES))
    league_aliases:   Mapping[str, str] = field(default_factory=lambda: _frozen(_LEAGUE_ALIASES))
    team_aliases:     Mapping[str, str] = field(default_factory=lambda: _frozen(_TEAM_ALIASES))

    league_suffixes:  tuple[str, ...]   = _LEAGUE_SUFFIXES
    team_suffixes:    tuple[str, ...]   = _TEAM_SUFFIXES

    league_countries: tuple[tuple[str, str], ...] = _LEAGUE_COUNTRIES

    sport_labels:     Mapping[str, str] = field(default_factory=lambda: _frozen(_SPORT_LABELS))
    league_labels:    Mapping[str, str] = field(default_factory=lambda: _frozen(_LEAGUE_LABELS))
    sport_icons:      Mapping[str, str] = field(default_factory=lambda: _frozen(_SPORT_ICONS))
    default_icon:     str               = DEFAULT_SPORT_ICON
    unknown_country:  str               = UNKNOWN_COUNTRY

    def __post_init__(self) -> None:
        # 호출자가 일반 dict 를 넘겨도 읽기 전용으로 고정
        for name in (
            "sport_aliases", "league_aliases", "team_aliases",
            "sport_labels", "league_labels", "sport_icons",
        ):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, _frozen(value))

        # 별칭 값은 slug 변환을 거치지 않으므로 여기서 형식을 검사
        for domain in ("sport", "league", "team"):
            for key, slug in self.aliases_for(domain).items():
                if not _ALIAS_SLUG_RE.fullmatch(slug):
                    raise ValueError(f"{domain} 별칭 {key!r} 의 slug 형식 오류: {slug!r}")
                if domain == "team" and "vs" in slug.split("-"):
                    raise ValueError(f"팀 별칭 {key!r} 의 slug 에 'vs' 토큰 포함: {slug!r}")

    @classmethod
    def default(cls) -> "TaxonomyTables":
        return cls()

    # ── 조회 헬퍼 ─────────────────────────────────────────────

    def aliases_for(self, domain: str) -> Mapping[str, str]:
        return {
            "sport":  self.sport_aliases,
            "league": self.league_aliases,
            "team":   self.team_aliases,
        }[domain]

    def suffixes_for(self, domain: str) -> tuple[str, ...]:
        if domain == "team":
            return self.team_suffixes
        if domain == "league":
            return self.league_suffixes
        return ()

    def country_for_league(self, league_name: str) -> str:
        """리그 이름에 포함된 조각으로 국가 코드를 추정합니다. 실패 시 'XX'."""
        for fragment, code in self.league_countries:
            if fragment in league_name:
                return code
        return self.unknown_country

    def sport_label(self, slug: str) -> str | None:
        return self.sport_labels.get(slug)

    def league_label(self, slug: str) -> str | None:
        return self.league_labels.get(slug)

    def sport_icon(self, slug: str) -> str:
        return self.sport_icons.get(slug, self.default_icon)
