"""
publishing 패키지 — 분석글 발행과 조회

    publishing.service   PublicationService.publish()  (단일 트랜잭션 오케스트레이터)
    publishing.lookup    AnalysisLookup                (SEO / 레거시 경로 조회)
    publishing.models    Pydantic 요청·응답 모델
    publishing.errors    PublishFailed, AuthorProfileMissing
"""
