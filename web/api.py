"""
web/api.py — FastAPI 분석글 SEO API 서버 (포트 8000)

uvicorn 으로 구동됩니다:
    uvicorn web.api:app --host 0.0.0.0 --port 8000
    python -m web.api

인증은 앞단 게이트웨이가 처리하고, 확인된 사용자 ID 를 X-Author-Id 헤더로 넘겨줍니다.

엔드포인트:
  GET    /health                  헬스체크 (DB 연결)
  POST   /analysis                분석글 발행 (분류 체계 해석 + SEO URL 생성)
  GET    /analysis/seo/{path}     SEO / 레거시 경로로 분석글 조회 (조회수 +1)
  GET    /seo/parse?path=         경로 분류 (신규 SEO / 레거시 / 불일치)
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from core.db import get_db_dep, get_session_factory, ping_db
from core.logger import Phase, log_context
from publishing.errors import AuthorProfileMissing, PublishFailed
from publishing.lookup import AnalysisLookup
from publishing.models import AnalysisDraft, AnalysisOut, PublishResponse
from publishing.service import PublicationService
from seo.metadata import build_page_metadata, canonical_url
from seo.url import parse, parse_legacy_path, path_from_seo_slug

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sports Live — Analysis SEO API",
    version="1.0.0",
    docs_url="/docs",      # Swagger UI (개발용)
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── 의존성 ───────────────────────────────────────────────────

def get_factory() -> sessionmaker:
    return get_session_factory()


def get_publication_service(factory: sessionmaker = Depends(get_factory)) -> PublicationService:
    return PublicationService(factory)


# ── 엔드포인트 ───────────────────────────────────────────────

@app.get("/health")
def health(factory: sessionmaker = Depends(get_factory)) -> JSONResponse:
    """
    DB 연결 상태를 확인합니다.

    HTTP 200: healthy
    HTTP 503: unhealthy (DB 연결 불가)
    """
    t0 = time.monotonic()
    ok = ping_db(factory)
    elapsed_ms = int((time.monotonic() - t0) * 1000)

    db_status = f"ok ({elapsed_ms}ms)" if ok else "error"
    logger.info("헬스체크 | status=%s db=%s", "healthy" if ok else "unhealthy", db_status)
    return JSONResponse(
        status_code=200 if ok else 503,
        content={"status": "healthy" if ok else "unhealthy", "db": db_status},
    )


@app.post("/analysis", status_code=201, response_model=PublishResponse)
def publish_analysis(
    draft:     AnalysisDraft,
    author_id: int = Header(..., alias="X-Author-Id", gt=0),
    service:   PublicationService = Depends(get_publication_service),
) -> PublishResponse:
    """
    분석글을 발행합니다.

    - 종목·리그·팀은 처음 등장하면 자동 생성됩니다.
    - 응답의 seo_url 은 /analysis/{sport}/{league}/{YYYY}/{MM}/{home}-vs-{away} 형식입니다.
    """
    with log_context(author_id=author_id, phase=Phase.API_CALL):
        try:
            result = service.publish(draft, author_id)
        except AuthorProfileMissing as exc:
            logger.warning("발행 거부 | author_id=%d: 분석가 프로필 없음", author_id)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except PublishFailed as exc:
            logger.exception("발행 실패 | author_id=%d: %s", author_id, exc)
            raise HTTPException(status_code=500, detail="분석글 발행에 실패했습니다.") from exc

    return PublishResponse(
        analysis      = AnalysisOut.model_validate(result.analysis),
        seo_url       = result.seo_url,
        canonical_url = canonical_url(result.seo_url),
    )


@app.get("/analysis/seo/{path:path}")
def get_analysis_by_seo_path(path: str, db: Session = Depends(get_db_dep)) -> dict[str, Any]:
    """
    SEO 경로(soccer/premier-league/2025/08/a-vs-b) 또는 레거시 slug 로 분석글을 조회합니다.

    조회될 때마다 분석글 views 와 작성자 total_views 가 1 증가합니다.
    """
    with log_context(phase=Phase.API_CALL):
        lookup   = AnalysisLookup(db)
        analysis = lookup.find_by_path(path)
        if analysis is None:
            raise HTTPException(status_code=404, detail="Analysis not found")

        lookup.record_view(analysis)
        seo = build_page_metadata(
            analysis,
            path   = path_from_seo_slug(analysis.seo_slug),
            author = lookup.author_profile(analysis),
        )
        body = AnalysisOut.model_validate(analysis).model_dump(mode="json")

    return {"analysis": body, "seo": seo}


@app.get("/seo/parse")
def parse_path(path: str = Query(..., min_length=1, description="/analysis/... 경로")) -> dict[str, Any]:
    """경로가 신규 SEO 형식인지, 레거시 형식인지 판별하고 구성 요소를 돌려줍니다."""
    parsed = parse(path)
    if parsed is not None:
        return {"match": True, "type": "seo", **parsed.to_dict()}

    legacy = parse_legacy_path(path)
    if legacy is not None:
        return {"match": True, "type": "legacy", "slug": legacy}

    return {"match": False}


def main() -> None:
    import uvicorn

    from core.config import validate_settings
    from core.logger import configure_logging

    configure_logging()
    with log_context(phase=Phase.INIT):
        validate_settings()
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    main()
