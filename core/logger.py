"""
core/logger.py — Sports Analysis SEO 서비스 구조화 로깅

아키텍처:
    structlog ──► stdlib.LoggerFactory ──► 두 개의 핸들러
                                           ├── StreamHandler     (콘솔)
                                           │     개발: 컬러 콘솔
                                           │     프로덕션: JSON
                                           └── RotatingFileHandler (파일)
                                                 항상 JSON
                                                 10 MB 초과 시 자동 교체, 백업 5개

    sqlalchemy / uvicorn 등 외부 라이브러리 로그도 같은 ProcessorFormatter 를 거칩니다.

Context Injection:
    발행 요청 하나 동안 author_id / analysis_id / phase 가 모든 로그에 자동 포함됩니다.
    contextvars 기반이라 스레드·비동기 양쪽에서 안전합니다.

빠른 시작:

    from core.logger import configure_logging, get_logger, log_context, Phase
    configure_logging()
    logger = get_logger(__name__)

    with log_context(author_id=7, phase=Phase.PUBLISH):
        logger.info("발행 시작")
        with log_context(phase=Phase.TAXONOMY):
            logger.info("리그 생성", slug="premier-league")
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import socket
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

import structlog
from structlog.stdlib import ProcessorFormatter

# ─────────────────────────────────────────────────────────────
# 처리 단계 상수
# ─────────────────────────────────────────────────────────────

class Phase:
    """로그 컨텍스트에 사용하는 처리 단계 식별자."""
    SLUG     = "Slug"              # slug 계산·할당
    TAXONOMY = "Taxonomy"          # Sport/League/Team find-or-create
    PUBLISH  = "Publish"           # 분석글 발행 트랜잭션
    LOOKUP   = "Lookup"            # SEO/레거시 URL → 분석글 조회
    API_CALL = "API Call"          # FastAPI 요청 처리
    INIT     = "Initialization"    # 앱 초기화


# ─────────────────────────────────────────────────────────────
# 내부 상수
# ─────────────────────────────────────────────────────────────

_LOG_DIR  = Path(os.getenv("LOG_DIR", "logs"))
_HOSTNAME = socket.gethostname()
_SERVICE  = "sportslive-seo"
_LOG_FILE = "sportslive-seo.log"


# ─────────────────────────────────────────────────────────────
# 커스텀 structlog 프로세서
# ─────────────────────────────────────────────────────────────

def _add_service_context(logger: Any, method: str, event_dict: dict) -> dict:
    """모든 로그에 서비스·호스트 메타를 삽입합니다."""
    event_dict.setdefault("service", _SERVICE)
    event_dict.setdefault("host",    _HOSTNAME)
    return event_dict


def _rename_event_to_message(logger: Any, method: str, event_dict: dict) -> dict:
    """파일(JSON) 핸들러 전용: 'event' 키를 'message' 로 바꿉니다."""
    event_dict["message"] = event_dict.pop("event", "")
    return event_dict


def _build_shared_processors() -> list:
    """structlog 과 stdlib 핸들러(foreign_pre_chain) 가 공유하는 프로세서 목록."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="@timestamp"),
        structlog.processors.StackInfoRenderer(),
        _add_service_context,
    ]


# ─────────────────────────────────────────────────────────────
# 로깅 설정
# ─────────────────────────────────────────────────────────────

def configure_logging(
    level:     str | None  = None,
    json_logs: bool | None = None,
    log_file:  bool        = True,
) -> None:
    """
    structlog + stdlib logging 을 통합 설정합니다.

    Args:
        level:     로그 레벨 (기본: settings.LOG_LEVEL)
        json_logs: 콘솔 JSON 강제 여부 (기본: production 이면 True)
        log_file:  파일 로그 활성화 (기본: True)
    """
    from core.config import settings

    log_level_str = (level or settings.LOG_LEVEL).upper()
    log_level     = getattr(logging, log_level_str, logging.INFO)
    is_production = settings.is_production
    use_json      = json_logs if json_logs is not None else is_production

    shared = _build_shared_processors()

    # wrap_for_formatter 가 마지막. 렌더링은 핸들러별 ProcessorFormatter 담당
    structlog.configure(
        processors=shared + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    console_renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if use_json
        else structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty() or sys.stdout.isatty(),
            sort_keys=False,
        )
    )
    console_formatter = ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.ExceptionRenderer(),
            console_renderer,
        ],
    )
    file_formatter = ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.ExceptionRenderer(),
            _rename_event_to_message,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(log_level)

    all_handlers: list[logging.Handler] = [console_handler]

    if log_file:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename    = str(_LOG_DIR / _LOG_FILE),
            maxBytes    = 10 * 1024 * 1024,  # 10 MB
            backupCount = 5,
            encoding    = "utf-8",
            delay       = True,
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_level)
        all_handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    for h in all_handlers:
        root.addHandler(h)
    root.setLevel(log_level)

    # INFO 레벨에서 SQL·HTTP 접근 로그가 넘치지 않도록 조정
    _library_levels: dict[str, str] = {
        "uvicorn":           "INFO",
        "uvicorn.access":    "WARNING",
        "sqlalchemy.engine": "WARNING",
        "sqlalchemy.pool":   "WARNING",
        "alembic":           "INFO",
        "httpx":             "WARNING",
        "boto3":             "WARNING",
        "botocore":          "WARNING",
        "urllib3":           "WARNING",
        "asyncio":           "WARNING",
    }
    for lib_name, lib_level in _library_levels.items():
        logging.getLogger(lib_name).setLevel(getattr(logging, lib_level, logging.WARNING))

    structlog.get_logger(__name__).info(
        "로깅 초기화 완료",
        level   = log_level_str,
        console = "json" if use_json else "color",
        file    = str(_LOG_DIR / _LOG_FILE) if log_file else "disabled",
        host    = _HOSTNAME,
    )


# ─────────────────────────────────────────────────────────────
# Context Injection API
# ─────────────────────────────────────────────────────────────

def bind_log_context(
    *,
    author_id:   Optional[int] = None,
    analysis_id: Optional[int] = None,
    phase:       Optional[str] = None,
    **extra: Any,
) -> None:
    """
    현재 스레드/코루틴의 로그 컨텍스트에 키를 추가/갱신합니다.

    None 인 값은 무시합니다. 기존 키는 유지됩니다.
    """
    ctx = {k: v for k, v in {
        "author_id":   author_id,
        "analysis_id": analysis_id,
        "phase":       phase,
        **extra,
    }.items() if v is not None}

    if ctx:
        structlog.contextvars.bind_contextvars(**ctx)


def clear_log_context() -> None:
    """현재 스레드/코루틴의 로그 컨텍스트를 모두 지웁니다."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(
    *,
    author_id:   Optional[int] = None,
    analysis_id: Optional[int] = None,
    phase:       Optional[str] = None,
    **extra: Any,
) -> Generator[None, None, None]:
    """
    with 블록 동안만 로그 컨텍스트를 설정하고, 종료 시 이전 상태로 복원합니다.

    중첩 사용 가능 — 안쪽 블록이 끝나면 바깥 블록의 phase 가 돌아옵니다.

    Usage:
        with log_context(author_id=7, phase=Phase.PUBLISH):
            logger.info("발행 시작")
            with log_context(phase=Phase.TAXONOMY):
                logger.info("팀 생성")      # author_id=7, phase=Taxonomy
            logger.info("발행 완료")        # author_id=7, phase=Publish
    """
    previous = structlog.contextvars.get_contextvars().copy()

    bind_log_context(
        author_id   = author_id,
        analysis_id = analysis_id,
        phase       = phase,
        **extra,
    )
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
        if previous:
            structlog.contextvars.bind_contextvars(**previous)


def get_logger(name: str = __name__) -> Any:
    """모듈별 structlog 로거를 반환합니다."""
    return structlog.get_logger(name)
