"""
database 패키지 — SQLAlchemy ORM 모델 및 Alembic 마이그레이션

구조:
    database/
    ├── __init__.py      ← 이 파일 (Base 재노출)
    ├── base.py          ← DeclarativeBase
    ├── models.py        ← ORM 모델 (Sport, League, Team, TeamLeagueSeason,
    │                        AnalystProfile, SportAnalysis, AnalysisPrediction)
    └── migrations/      ← Alembic 마이그레이션
        ├── env.py
        └── versions/
            └── 0001_taxonomy_and_analyses.py

마이그레이션 명령어:
    alembic upgrade head
    alembic revision --autogenerate -m "add column"
    alembic downgrade -1
"""

from database.base import Base  # noqa: F401 (다른 모듈에서 Base import용)
