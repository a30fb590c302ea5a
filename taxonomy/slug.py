"""
taxonomy/slug.py — 자유 입력 텍스트 → URL-safe slug

변환 순서 (domain 별):
  1. 별칭 테이블 조회 (정확히 일치 → 대소문자 무시 일치)
       "Premier League" / "프리미어리그" / "EPL"  →  premier-league
  2. team / league 이면 접미사(FC, United, City ...) 를 단어 경계 기준으로 제거
  3. python-slugify 로 일반 변환 (비라틴 문자는 로마자 음역, 영숫자 외 구간은 '-' 하나로)
     결과가 비면 접미사 제거 전 원문으로 다시 변환
  4. 그래도 비면 "<domain>-<sha1 앞 8자리>" 로 대체

slug 는 항상 비어 있지 않고 '--' 를 포함하지 않습니다.
팀 slug 에서는 단독 'vs' 토큰을 'v' 로 바꿔 SEO 경로의 '-vs-' 구분자와 겹치지 않게 합니다.

길이는 SLUG_MAX_LENGTH (DB 컬럼 길이와 같음) 이하로 단어 경계에서 자릅니다.
한글 이름은 음역되면서 2~3배로 길어지므로 입력 길이 제한만으로는 부족합니다.

유일성은 보장하지 않습니다 (taxonomy.allocator 참고).
"""

from __future__ import annotations

import hashlib
import re
from typing import Literal, Optional

import structlog
from slugify import slugify as _slugify

from taxonomy.tables import TaxonomyTables

logger = structlog.get_logger(__name__)

Domain = Literal["sport", "league", "team"]
DOMAINS: tuple[str, ...] = ("sport", "league", "team")

# 팀 slug 안의 단독 vs 토큰
_VS_TOKEN = "vs"

# domain 별 최대 길이: sports.slug / leagues.slug / teams.slug 컬럼과 같아야 함
SLUG_MAX_LENGTH: dict[str, int] = {
    "sport":  100,
    "league": 100,
    "team":   150,
}

# sport_analyses.slug 컬럼 길이 (-N 접미사 포함)
LEGACY_SLUG_MAX_LENGTH = 255


def slugify_text(text: str, max_length: int = 0) -> str:
    """
    별칭·접미사 처리 없이 일반 slug 변환만 수행합니다.

    레거시 분석글 slug (2025-08-16-liverpool-vs-bournemouth) 생성에 사용합니다.
    빈 문자열이 나올 수 있습니다.

    Args:
        text:       원문
        max_length: 0 보다 크면 이 길이 이하로 단어 경계에서 자름 (앞쪽 단어 순서 유지)
    """
    return _slugify(
        text or "",
        lowercase=True,
        max_length=max_length,
        word_boundary=True,
        save_order=True,
        separator="-",
    )


def _digest_slug(text: str, domain: str) -> str:
    digest = hashlib.sha1(text.encode("utf-8")).hexdigest()[:8]
    return f"{domain}-{digest}"


def _suffix_pattern(suffixes: tuple[str, ...]) -> Optional[re.Pattern[str]]:
    if not suffixes:
        return None
    # 긴 것부터 시도해야 'F.C.' 가 'FC' 보다 먼저 매칭됨
    ordered = sorted(suffixes, key=len, reverse=True)
    alternation = "|".join(re.escape(s) for s in ordered)
    # 경계는 ASCII 영숫자 기준: "FC서울" 의 FC 도 제거 대상
    return re.compile(rf"(?<![A-Za-z0-9.])(?:{alternation})(?![A-Za-z0-9])", re.IGNORECASE)


class SlugCodec:
    """
    domain 별 slug 변환기. 순수 함수 묶음이며 I/O 가 없고 스레드 안전합니다.

    Args:
        tables: 별칭·접미사 테이블 (없으면 TaxonomyTables.default())
    """

    def __init__(self, tables: Optional[TaxonomyTables] = None) -> None:
        self._tables = tables or TaxonomyTables.default()
        self._folded: dict[str, dict[str, str]] = {
            domain: {key.casefold(): slug for key, slug in self._tables.aliases_for(domain).items()}
            for domain in DOMAINS
        }
        self._suffix_re: dict[str, Optional[re.Pattern[str]]] = {
            domain: _suffix_pattern(self._tables.suffixes_for(domain))
            for domain in DOMAINS
        }

    @property
    def tables(self) -> TaxonomyTables:
        return self._tables

    # ── 공개 API ──────────────────────────────────────────────

    def slugify(self, text: str, domain: Domain) -> str:
        """text 를 domain 규칙으로 slug 변환합니다. 결과는 절대 비어 있지 않습니다."""
        if domain not in DOMAINS:
            raise ValueError(f"알 수 없는 slug domain: {domain!r}")

        raw = (text or "").strip()

        aliased = self._lookup_alias(raw, domain)
        if aliased is not None:
            return aliased

        limit = SLUG_MAX_LENGTH[domain]
        slug = slugify_text(self._strip_suffixes(raw, domain), limit)
        if not slug:
            # 접미사만으로 이루어진 이름 ("Real", "FC") → 원문 그대로 변환
            slug = slugify_text(raw, limit)
        if not slug:
            slug = _digest_slug(raw, domain)
            logger.debug("slug 변환 결과 없음 — 해시 slug 사용", domain=domain, text=raw, slug=slug)

        if domain == "team":
            slug = self._rewrite_vs(slug)
        return slug

    def sport_slug(self, text: str) -> str:
        return self.slugify(text, "sport")

    def league_slug(self, text: str) -> str:
        return self.slugify(text, "league")

    def team_slug(self, text: str) -> str:
        return self.slugify(text, "team")

    # ── 내부 단계 ─────────────────────────────────────────────

    def _lookup_alias(self, text: str, domain: str) -> Optional[str]:
        exact = self._tables.aliases_for(domain).get(text)
        if exact is not None:
            return exact
        return self._folded[domain].get(text.casefold())

    def _strip_suffixes(self, text: str, domain: str) -> str:
        pattern = self._suffix_re[domain]
        if pattern is None:
            return text
        return re.sub(r"\s{2,}", " ", pattern.sub(" ", text)).strip()

    @staticmethod
    def _rewrite_vs(slug: str) -> str:
        tokens = slug.split("-")
        if _VS_TOKEN not in tokens:
            return slug
        return "-".join("v" if token == _VS_TOKEN else token for token in tokens)
