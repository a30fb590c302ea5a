"""
core/config.py — Sports Analysis SEO 서비스 통합 설정

시크릿 로드 우선순위:
  1. AWS Secrets Manager  (ENVIRONMENT=production 일 때)
  2. 환경 변수 / .env 파일 (로컬 개발)

사용법:
    from core.config import settings

    url  = settings.DATABASE_URL
    base = settings.BASE_URL
    print(settings.is_production)

─────────────────────────────────────────────────────────────────
[URL 타임존 규약]

 SEO URL 의 /{YYYY}/{MM}/ 세그먼트와 리그 시즌 계산, 레거시 slug 의 날짜는
 모두 MATCH_TIMEZONE 하나의 기준으로 계산합니다.
 기준을 바꾸면 이미 발행된 URL 과 새 URL 의 연/월이 어긋날 수 있으므로
 운영 중에는 변경하지 않습니다.
─────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

import boto3
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# -------------------------------------------------------
# Secrets Manager 헬퍼
# -------------------------------------------------------

def _fetch_secret(secret_id: str, region: str) -> dict[str, Any]:
    """Secrets Manager 에서 JSON 시크릿을 가져옵니다. 실패 시 빈 딕셔너리 반환."""
    try:
        client = boto3.client("secretsmanager", region_name=region)
        raw = client.get_secret_value(SecretId=secret_id)["SecretString"]
        return json.loads(raw)
    except Exception as exc:
        logger.debug("Secrets Manager 조회 실패 [%s]: %s", secret_id, exc)
        return {}


def _load_secrets(region: str) -> dict[str, Any]:
    """프로젝트 시크릿을 일괄 로드합니다."""
    combined: dict[str, Any] = {}
    for key in ("DATABASE_URL",):
        combined.update(_fetch_secret(f"sportslive/{key}", region))
    return combined


# -------------------------------------------------------
# 설정 데이터클래스
# -------------------------------------------------------

@dataclass(frozen=True)
class Settings:
    # ── 민감 정보 ────────────────────────────────────────
    DATABASE_URL: str

    # ── AWS ──────────────────────────────────────────────
    AWS_REGION: str = "ap-northeast-2"

    # ── 배포 환경 ─────────────────────────────────────────
    ENVIRONMENT: str = "development"

    # ── SEO ───────────────────────────────────────────────
    BASE_URL: str = "https://sportslive.com"
    SUPPORTED_LANGUAGES: list = field(default_factory=lambda: ["ko", "en"])

    # URL 연/월·시즌·레거시 slug 날짜 계산 기준 타임존
    MATCH_TIMEZONE: str = "UTC"

    # 레거시 slug 충돌 시 -1, -2 ... 접미사 최대 시도 횟수
    SLUG_MAX_SUFFIX: int = 1000

    # ── 로깅 ──────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── 편의 프로퍼티 ─────────────────────────────────────
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def base_url(self) -> str:
        """끝 '/' 를 제거한 사이트 origin."""
        return self.BASE_URL.rstrip("/")


# -------------------------------------------------------
# 싱글톤 팩토리
# -------------------------------------------------------

def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("정수 환경 변수 파싱 실패 [%s=%r] — 기본값 %d 사용", key, raw, default)
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings 싱글톤을 반환합니다.

    - production: Secrets Manager 우선 → 환경 변수 fallback
    - 그 외: 환경 변수 / .env 만 사용
    """
    env    = os.getenv("ENVIRONMENT", "development")
    region = os.getenv("AWS_REGION", "ap-northeast-2")

    secrets: dict[str, Any] = {}
    if env == "production":
        logger.info("Secrets Manager에서 시크릿 로드 중...")
        secrets = _load_secrets(region)

    def resolve(key: str) -> str:
        """환경 변수 → Secrets Manager 순으로 값 탐색"""
        return os.getenv(key) or secrets.get(key, "")

    languages = os.getenv("SUPPORTED_LANGUAGES", "ko,en")

    return Settings(
        DATABASE_URL        = resolve("DATABASE_URL"),
        AWS_REGION          = region,
        ENVIRONMENT         = env,
        BASE_URL            = os.getenv("BASE_URL", "https://sportslive.com"),
        SUPPORTED_LANGUAGES = [lang.strip() for lang in languages.split(",") if lang.strip()],
        MATCH_TIMEZONE      = os.getenv("MATCH_TIMEZONE", "UTC"),
        SLUG_MAX_SUFFIX     = _int_env("SLUG_MAX_SUFFIX", 1000),
        LOG_LEVEL           = os.getenv("LOG_LEVEL", "INFO"),
    )


# 모듈 레벨 싱글톤
settings = get_settings()


# -------------------------------------------------------
# 시작 시 필수 값 검증
# -------------------------------------------------------

def validate_settings() -> None:
    """앱 시작 시 호출하여 필수 설정이 모두 있는지 확인합니다."""
    s = get_settings()
    missing = []

    if not s.DATABASE_URL:
        missing.append("DATABASE_URL")
    if not s.BASE_URL.startswith(("http://", "https://")):
        missing.append("BASE_URL (http:// 또는 https:// 로 시작해야 함)")
    if s.SLUG_MAX_SUFFIX < 1:
        missing.append("SLUG_MAX_SUFFIX (1 이상)")

    if missing:
        raise ValueError(
            f"필수 설정 누락/오류: {', '.join(missing)}\n"
            "  운영: aws secretsmanager put-secret-value --secret-id sportslive/<KEY> ...\n"
            "  로컬: .env 파일에 KEY=value 형식으로 추가"
        )

    logger.info(
        "설정 로드 완료 | env=%s | DB=%s | base=%s | tz=%s",
        s.ENVIRONMENT,
        "OK" if s.DATABASE_URL else "MISSING",
        s.base_url,
        s.MATCH_TIMEZONE,
    )
