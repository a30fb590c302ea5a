"""초기 스키마 — 분류 체계(sports/leagues/teams/team_league_seasons) + 분석글

Revision ID: 0001
Revises:
Create Date: 2025-08-10
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_NOW = sa.text("NOW()")
_EMPTY_TEXT_ARRAY = sa.text("ARRAY[]::text[]")


def _timestamptz(name: str) -> sa.Column:
    return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=False, server_default=_NOW)


def upgrade() -> None:
    # ── sports ────────────────────────────────────────────────
    op.create_table(
        "sports",
        sa.Column("id",       sa.Integer(),     primary_key=True),
        sa.Column("slug",     sa.String(100),   nullable=False, unique=True),
        sa.Column("name_en",  sa.String(200),   nullable=False),
        sa.Column("name_ko",  sa.String(200),   nullable=False),
        sa.Column("icon",     sa.String(16)),
        sa.Column("keywords", postgresql.ARRAY(sa.Text()), nullable=False, server_default=_EMPTY_TEXT_ARRAY),
        _timestamptz("created_at"),
    )

    # ── leagues (slug 는 종목 내 유니크) ──────────────────────
    op.create_table(
        "leagues",
        sa.Column("id",             sa.Integer(),   primary_key=True),
        sa.Column("slug",           sa.String(100), nullable=False),
        sa.Column("sport_id",       sa.Integer(),   sa.ForeignKey("sports.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("name_en",        sa.String(200), nullable=False),
        sa.Column("name_ko",        sa.String(200), nullable=False),
        sa.Column("country",        sa.String(2),   nullable=False, server_default="XX"),
        sa.Column("current_season", sa.String(9)),
        sa.Column("keywords",       postgresql.ARRAY(sa.Text()), nullable=False, server_default=_EMPTY_TEXT_ARRAY),
        _timestamptz("created_at"),
        sa.UniqueConstraint("sport_id", "slug", name="uq_leagues_sport_slug"),
    )
    op.create_index("idx_leagues_country", "leagues", ["country"])

    # ── teams (slug 전역 유니크) ──────────────────────────────
    op.create_table(
        "teams",
        sa.Column("id",       sa.Integer(),   primary_key=True),
        sa.Column("slug",     sa.String(150), nullable=False, unique=True),
        sa.Column("sport_id", sa.Integer(),   sa.ForeignKey("sports.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("name_en",  sa.String(200), nullable=False),
        sa.Column("name_ko",  sa.String(200), nullable=False),
        sa.Column("country",  sa.String(2),   nullable=False, server_default="XX"),
        sa.Column("keywords", postgresql.ARRAY(sa.Text()), nullable=False, server_default=_EMPTY_TEXT_ARRAY),
        _timestamptz("created_at"),
    )
    op.create_index("idx_teams_sport_id", "teams", ["sport_id"])

    # ── team_league_seasons ───────────────────────────────────
    op.create_table(
        "team_league_seasons",
        sa.Column("id",        sa.Integer(), primary_key=True),
        sa.Column("team_id",   sa.Integer(), sa.ForeignKey("teams.id", ondelete="CASCADE"),   nullable=False),
        sa.Column("league_id", sa.Integer(), sa.ForeignKey("leagues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("season",    sa.String(9), nullable=False),
        _timestamptz("created_at"),
        sa.UniqueConstraint("team_id", "league_id", "season", name="uq_team_league_season"),
    )
    op.create_index("idx_tls_league_season", "team_league_seasons", ["league_id", "season"])

    # ── analyst_profiles ──────────────────────────────────────
    op.create_table(
        "analyst_profiles",
        sa.Column("id",                  sa.Integer(),   primary_key=True),
        sa.Column("user_id",             sa.Integer(),   nullable=False, unique=True),
        sa.Column("display_name",        sa.String(100), nullable=False),
        sa.Column("total_predictions",   sa.Integer(),   nullable=False, server_default="0"),
        sa.Column("correct_predictions", sa.Integer(),   nullable=False, server_default="0"),
        sa.Column("total_views",         sa.Integer(),   nullable=False, server_default="0"),
        _timestamptz("created_at"),
        _timestamptz("updated_at"),
    )

    # ── sport_analyses ────────────────────────────────────────
    op.create_table(
        "sport_analyses",
        sa.Column("id",           sa.Integer(),   primary_key=True),
        sa.Column("author_id",    sa.Integer(),   nullable=False),
        sa.Column("slug",         sa.String(255), nullable=False, unique=True),
        sa.Column("seo_slug",     sa.String(520), nullable=False),

        sa.Column("sport_id",     sa.Integer(), sa.ForeignKey("sports.id"),  nullable=False),
        sa.Column("league_id",    sa.Integer(), sa.ForeignKey("leagues.id"), nullable=False),
        sa.Column("home_team_id", sa.Integer(), sa.ForeignKey("teams.id"),   nullable=False),
        sa.Column("away_team_id", sa.Integer(), sa.ForeignKey("teams.id"),   nullable=False),

        sa.Column("match_date",   sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("sport_type",   sa.String(50),  nullable=False),
        sa.Column("league",       sa.String(200), nullable=False),
        sa.Column("competition",  sa.String(200)),
        sa.Column("home_team",    sa.String(200), nullable=False),
        sa.Column("away_team",    sa.String(200), nullable=False),

        sa.Column("title",            sa.String(300), nullable=False),
        sa.Column("meta_description", sa.Text()),
        sa.Column("meta_keywords",    postgresql.ARRAY(sa.Text()), nullable=False, server_default=_EMPTY_TEXT_ARRAY),

        sa.Column("home_formation",     sa.String(20)),
        sa.Column("away_formation",     sa.String(20)),
        sa.Column("home_analysis",      sa.Text()),
        sa.Column("away_analysis",      sa.Text()),
        sa.Column("tactical_analysis",  sa.Text()),
        sa.Column("key_players",        postgresql.JSONB),
        sa.Column("injury_info",        postgresql.JSONB),
        sa.Column("head_to_head",       postgresql.JSONB),
        sa.Column("recent_form",        postgresql.JSONB),
        sa.Column("prediction_summary", sa.Text()),
        sa.Column("confidence_level",   sa.Integer()),

        sa.Column("status",       sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("is_published", sa.Boolean(),  nullable=False, server_default="false"),
        sa.Column("published_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("views",        sa.Integer(),  nullable=False, server_default="0"),
        _timestamptz("created_at"),
        _timestamptz("updated_at"),

        sa.CheckConstraint(
            "status IN ('DRAFT','PUBLISHED','ARCHIVED')",
            name="ck_analyses_status",
        ),
        sa.CheckConstraint(
            "confidence_level IS NULL OR confidence_level BETWEEN 0 AND 100",
            name="ck_analyses_confidence",
        ),
    )
    op.create_index("idx_analyses_seo_slug",   "sport_analyses", ["seo_slug"])
    op.create_index("idx_analyses_match_date", "sport_analyses", ["sport_id", "league_id", "match_date"])
    op.create_index("idx_analyses_author",     "sport_analyses", ["author_id", "created_at"])

    # ── analysis_predictions ──────────────────────────────────
    op.create_table(
        "analysis_predictions",
        sa.Column("id",          sa.Integer(), primary_key=True),
        sa.Column(
            "analysis_id",
            sa.Integer(),
            sa.ForeignKey("sport_analyses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_id",   sa.Integer(),   nullable=False),
        sa.Column("bet_type",    sa.String(30),  nullable=False),
        sa.Column("prediction",  sa.String(300), nullable=False),
        sa.Column("odds",        sa.Float()),
        sa.Column("stake",       sa.Integer()),
        sa.Column("reasoning",   sa.Text()),
        sa.Column("result",      sa.String(20),  nullable=False, server_default="pending"),
        _timestamptz("created_at"),
        sa.CheckConstraint(
            "bet_type IN ('match_result','handicap','over_under','both_score',"
            "'correct_score','first_goal','half_time','special')",
            name="ck_predictions_bet_type",
        ),
        sa.CheckConstraint(
            "result IN ('pending','correct','incorrect','partial','cancelled')",
            name="ck_predictions_result",
        ),
        sa.CheckConstraint("odds IS NULL OR odds > 0", name="ck_predictions_odds"),
    )
    op.create_index("idx_predictions_analysis", "analysis_predictions", ["analysis_id"])

    # updated_at 자동 갱신 트리거
    op.execute("""
        CREATE OR REPLACE FUNCTION trg_set_updated_at()
        RETURNS TRIGGER LANGUAGE plpgsql AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$
    """)
    for table in ("analyst_profiles", "sport_analyses"):
        op.execute(f"""
            CREATE TRIGGER set_updated_at_{table}
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION trg_set_updated_at()
        """)


def downgrade() -> None:
    for table in ("sport_analyses", "analyst_profiles"):
        op.execute(f"DROP TRIGGER IF EXISTS set_updated_at_{table} ON {table}")
    op.execute("DROP FUNCTION IF EXISTS trg_set_updated_at()")

    op.drop_table("analysis_predictions")
    op.drop_table("sport_analyses")
    op.drop_table("analyst_profiles")
    op.drop_table("team_league_seasons")
    op.drop_table("teams")
    op.drop_table("leagues")
    op.drop_table("sports")
