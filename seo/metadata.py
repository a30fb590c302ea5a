"""
seo/metadata.py — canonical / hreflang alternate / 브레드크럼 / JSON-LD

    canonical_url("/analysis/soccer/...")            → "https://sportslive.com/analysis/soccer/..."
    alternate_urls("/analysis/soccer/...")           → [{"lang": "ko", "url": ".../ko/analysis/..."}, ...]
    breadcrumbs("/analysis/soccer/premier-league/2025/08/a-vs-b")
        → 홈 / 경기 분석 / 축구 / 프리미어리그 / 2025년 08월

브레드크럼 라벨은 TaxonomyTables 의 정적 라벨만 사용합니다 (DB 조회 없음).
새로 생긴 리그처럼 라벨이 없으면 slug 를 그대로 보여줍니다.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from seo.url import ANALYSIS_PREFIX, parse, path_from_seo_slug
from taxonomy.tables import TaxonomyTables

SITE_NAME = "Sports Live"

_DEFAULT_TABLES = TaxonomyTables.default()


def _origin(base_origin: Optional[str]) -> str:
    if base_origin is None:
        from core.config import settings
        base_origin = settings.BASE_URL
    return base_origin.rstrip("/")


def canonical_url(path: str, base_origin: Optional[str] = None) -> str:
    return f"{_origin(base_origin)}{path}"


def alternate_urls(
    path:        str,
    base_origin: Optional[str]           = None,
    langs:       Optional[Sequence[str]] = None,
) -> list[dict[str, str]]:
    """hreflang 대체 URL 목록. 언어 기본값은 settings.SUPPORTED_LANGUAGES."""
    if langs is None:
        from core.config import settings
        langs = settings.SUPPORTED_LANGUAGES
    origin = _origin(base_origin)
    return [{"lang": lang, "url": f"{origin}/{lang}{path}"} for lang in langs]


def breadcrumbs(path: str, tables: Optional[TaxonomyTables] = None) -> list[dict[str, str]]:
    """SEO 경로의 브레드크럼. 해석할 수 없는 경로는 빈 리스트."""
    parsed = parse(path)
    if parsed is None:
        return []

    tables = tables or _DEFAULT_TABLES
    sport_href  = f"{ANALYSIS_PREFIX}{parsed.sport}"
    league_href = f"{sport_href}/{parsed.league}"

    return [
        {"label": "홈",        "href": "/"},
        {"label": "경기 분석", "href": ANALYSIS_PREFIX.rstrip("/")},
        {"label": tables.sport_label(parsed.sport) or parsed.sport,    "href": sport_href},
        {"label": tables.league_label(parsed.league) or parsed.league, "href": league_href},
        {
            "label": f"{parsed.year}년 {parsed.month}월",
            "href":  f"{league_href}/{parsed.year}/{parsed.month}",
        },
    ]


# ─────────────────────────────────────────────────────────────
# 페이지 메타데이터 (분석글 상세)
# ─────────────────────────────────────────────────────────────

def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def default_description(analysis: Any) -> str:
    return (
        f"{analysis.home_team} vs {analysis.away_team} "
        f"match analysis and predictions for {analysis.league}"
    )


def build_page_metadata(
    analysis:    Any,
    path:        Optional[str]           = None,
    base_origin: Optional[str]           = None,
    langs:       Optional[Sequence[str]] = None,
    author:      Any                     = None,
    tables:      Optional[TaxonomyTables] = None,
) -> dict[str, Any]:
    """
    분석글 상세 페이지의 SEO 메타데이터를 만듭니다.

    path 를 생략하면 저장된 seo_slug 의 경로를 씁니다.
    레거시 slug 로 조회한 경우에도 canonical 은 신규 경로가 됩니다.

    Args:
        analysis: SportAnalysis (sport 관계가 로드 가능한 상태)
        author:   AnalystProfile 또는 None
    """
    origin = _origin(base_origin)
    path   = path or path_from_seo_slug(analysis.seo_slug)
    url    = canonical_url(path, origin)
    sport  = getattr(analysis, "sport", None)
    sport_name = sport.name_en if sport is not None else None

    author_ld: dict[str, Any] = {"@type": "Person"}
    if author is not None:
        author_ld["name"] = author.display_name
        author_ld["url"]  = f"{origin}/analysts/{author.user_id}"

    structured = {
        "@context":      "https://schema.org",
        "@type":         "Article",
        "headline":      analysis.title,
        "description":   analysis.meta_description,
        "datePublished": _iso(analysis.published_at),
        "dateModified":  _iso(analysis.updated_at),
        "author":        author_ld,
        "publisher": {
            "@type": "Organization",
            "name":  SITE_NAME,
            "logo":  {"@type": "ImageObject", "url": f"{origin}/logo.png"},
        },
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
        "articleSection":   sport_name or "Sports",
        "about": {
            "@type":     "SportsEvent",
            "name":      f"{analysis.home_team} vs {analysis.away_team}",
            "startDate": _iso(analysis.match_date),
            "sport":     sport_name,
            "homeTeam":  {"@type": "SportsTeam", "name": analysis.home_team},
            "awayTeam":  {"@type": "SportsTeam", "name": analysis.away_team},
            "location":  {"@type": "Place", "name": analysis.league},
        },
    }

    return {
        "title":          analysis.title,
        "description":    analysis.meta_description or default_description(analysis),
        "keywords":       list(analysis.meta_keywords or []),
        "canonical":      url,
        "alternates":     alternate_urls(path, origin, langs),
        "breadcrumbs":    breadcrumbs(path, tables),
        "structuredData": structured,
    }
