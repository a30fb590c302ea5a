"""
database/migrations/env.py — Alembic 실행 환경 설정

DB URL 은 core.config.settings.DATABASE_URL 을 사용합니다.
(환경변수 / .env / production 에서는 Secrets Manager 순으로 해석)
"""

from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가 (alembic CLI 는 패키지 설치 없이도 실행됨)
sys.path.insert(0, str(Path(__file__).parents[2]))

from alembic import context
from sqlalchemy import engine_from_config, pool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def get_url() -> str:
    from core.config import settings

    url = settings.DATABASE_URL
    if not url:
        raise RuntimeError(
            "DATABASE_URL 이 설정되지 않았습니다.\n"
            ".env 파일 또는 환경변수를 확인해주세요."
        )
    return url.replace("postgres://", "postgresql://", 1)


config.set_main_option("sqlalchemy.url", get_url())

# 모델을 모두 임포트해야 autogenerate 가 테이블을 인식합니다.
from database.base import Base        # noqa: E402
import database.models                # noqa: E402, F401

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """오프라인 모드: SQL 스크립트만 생성."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """온라인 모드: 실제 DB에 연결하여 마이그레이션 실행."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
