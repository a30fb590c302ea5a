"""
taxonomy/errors.py — 분류 체계 예외
"""

from __future__ import annotations


class TaxonomyError(Exception):
    """분류 체계(slug·Sport/League/Team) 처리 중 발생하는 예외의 기반 클래스."""


class SlugAllocationError(TaxonomyError):
    """접미사 시도 한도 안에서 빈 slug 를 찾지 못했을 때."""

    def __init__(self, candidate: str, attempts: int) -> None:
        self.candidate = candidate
        self.attempts  = attempts
        super().__init__(
            f"slug 할당 실패: {candidate!r} (접미사 {attempts}회 시도 모두 충돌)"
        )


class TaxonomyConflictError(TaxonomyError):
    """
    생성 중 유니크 제약 충돌이 났는데 재조회로도 승자 행을 찾지 못했을 때.

    보통 충돌 대상이 같은 slug 의 다른 종목 행이거나, 승자 트랜잭션이 아직
    커밋되지 않은 경우입니다.
    """

    def __init__(self, entity: str, slug: str) -> None:
        self.entity = entity
        self.slug   = slug
        super().__init__(f"{entity} 생성 충돌 후 재조회 실패: slug={slug!r}")
