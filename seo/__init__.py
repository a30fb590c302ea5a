"""
seo 패키지 — SEO 경로 코덱과 메타데이터 빌더

    seo.url       generate / parse, 레거시 경로, seo_slug 변환
    seo.metadata  canonical / alternate / breadcrumbs / JSON-LD
"""
