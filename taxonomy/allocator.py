"""
taxonomy/allocator.py — 후보 slug → 유일 slug (결정적 접미사 부여)

    allocate("x", exists)  →  "x", "x-1", "x-2", ... 중 처음으로 비어 있는 값

exists 검사와 최종 INSERT 가 같은 트랜잭션 안에 있어야 올바르게 동작합니다.
INSERT 충돌 시 재시도는 하지 않습니다 (호출자 트랜잭션 전체가 롤백).
"""

from __future__ import annotations

from typing import Callable, Optional

import structlog

from taxonomy.errors import SlugAllocationError

logger = structlog.get_logger(__name__)

ExistsFn = Callable[[str], bool]


def allocate(
    candidate: str,
    exists: ExistsFn,
    max_attempts: Optional[int] = None,
) -> str:
    """
    candidate 가 사용 중이면 -1, -2 ... 접미사를 붙여 처음 비어 있는 slug 를 반환합니다.

    Args:
        candidate:    기본 slug (비어 있으면 ValueError)
        exists:       slug 사용 여부 검사 함수. 예외는 그대로 전파됩니다.
        max_attempts: 접미사 최대 시도 횟수 (기본: settings.SLUG_MAX_SUFFIX)

    Raises:
        SlugAllocationError: 접미사 max_attempts 개가 모두 사용 중일 때
    """
    if not candidate:
        raise ValueError("candidate slug 가 비어 있습니다.")

    if max_attempts is None:
        from core.config import settings
        max_attempts = settings.SLUG_MAX_SUFFIX

    if not exists(candidate):
        return candidate

    for counter in range(1, max_attempts + 1):
        slug = f"{candidate}-{counter}"
        if not exists(slug):
            logger.debug("slug 충돌 — 접미사 부여", candidate=candidate, slug=slug)
            return slug

    logger.warning("slug 접미사 한도 초과", candidate=candidate, attempts=max_attempts)
    raise SlugAllocationError(candidate, max_attempts)
