"""
publishing/errors.py — 발행 예외
"""

from __future__ import annotations


class PublishFailed(Exception):
    """
    발행 트랜잭션 실패. 원인 예외는 __cause__ 로 연결됩니다.

    이 예외가 나면 해당 요청에서 생성하려던 분류 체계·분석글·예측 행은
    하나도 남지 않습니다.
    """


class AuthorProfileMissing(PublishFailed):
    """작성자의 AnalystProfile 이 없어 예측 수를 누적할 수 없을 때."""

    def __init__(self, author_id: int) -> None:
        self.author_id = author_id
        super().__init__(f"분석가 프로필 없음: author_id={author_id}")
