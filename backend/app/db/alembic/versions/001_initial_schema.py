"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-17

Creates:
- user_account, club, club_membership, auth_session
- gender, medal, season, discipline
- age_group, athlete, performance
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # user_account table
    op.create_table(
        "user_account",
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # club table
    op.create_table(
        "club",
        sa.Column("club_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # club_membership table
    op.create_table(
        "club_membership",
        sa.Column("membership_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("club_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.user_id"]),
        sa.ForeignKeyConstraint(["club_id"], ["club.club_id"]),
        sa.UniqueConstraint("user_id", "club_id", name="uq_membership_user_club"),
    )
    op.create_index("idx_membership_user_active", "club_membership", ["user_id", "is_active"])

    # auth_session table
    op.create_table(
        "auth_session",
        sa.Column("session_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("selected_club_id", sa.Uuid(), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.user_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["selected_club_id"], ["club.club_id"]),
    )
    op.create_index("idx_session_user", "auth_session", ["user_id", "revoked"])

    # lookup tables
    op.create_table(
        "gender",
        sa.Column("gender_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(32), nullable=False, unique=True),
        sa.Column("initial", sa.String(1), nullable=False),
    )
    op.create_table(
        "medal",
        sa.Column("medal_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(32), nullable=False, unique=True),
        sa.Column("ordinal", sa.Integer(), nullable=False),
    )

    # global catalog
    op.create_table(
        "season",
        sa.Column("season_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_table(
        "discipline",
        sa.Column("discipline_id", sa.Uuid(), primary_key=True),
        sa.Column("season_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_timed", sa.Boolean(), nullable=False),
        sa.Column("is_measured", sa.Boolean(), nullable=False),
        sa.Column("team_size", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["season_id"], ["season.season_id"]),
        sa.UniqueConstraint("season_id", "name", name="uq_discipline_season_name"),
    )

    # club-scoped data
    op.create_table(
        "age_group",
        sa.Column("age_group_id", sa.Uuid(), primary_key=True),
        sa.Column("club_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(32), nullable=False),
        sa.Column("ordinal", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["club.club_id"]),
        sa.UniqueConstraint("club_id", "name", name="uq_age_group_club_name"),
    )

    op.create_table(
        "athlete",
        sa.Column("athlete_id", sa.Uuid(), primary_key=True),
        sa.Column("club_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(64), nullable=False),
        sa.Column("last_name", sa.String(64), nullable=False),
        sa.Column("gender_id", sa.Uuid(), nullable=False),
        sa.Column("age_group_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["club.club_id"]),
        sa.ForeignKeyConstraint(["gender_id"], ["gender.gender_id"]),
        sa.ForeignKeyConstraint(["age_group_id"], ["age_group.age_group_id"]),
    )
    op.create_index("idx_athlete_club_name", "athlete", ["club_id", "last_name", "first_name"])

    op.create_table(
        "performance",
        sa.Column("performance_id", sa.Uuid(), primary_key=True),
        sa.Column("club_id", sa.Uuid(), nullable=False),
        sa.Column("athlete_id", sa.Uuid(), nullable=False),
        sa.Column("discipline_id", sa.Uuid(), nullable=False),
        sa.Column("age_group_id", sa.Uuid(), nullable=False),
        sa.Column("medal_id", sa.Uuid(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("time_seconds", sa.Float(), nullable=True),
        sa.Column("distance_meters", sa.Float(), nullable=True),
        sa.Column("event_details", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["club_id"], ["club.club_id"]),
        sa.ForeignKeyConstraint(["athlete_id"], ["athlete.athlete_id"]),
        sa.ForeignKeyConstraint(["discipline_id"], ["discipline.discipline_id"]),
        sa.ForeignKeyConstraint(["age_group_id"], ["age_group.age_group_id"]),
        sa.ForeignKeyConstraint(["medal_id"], ["medal.medal_id"]),
    )
    op.create_index("idx_performance_club_date", "performance", ["club_id", "event_date"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("performance")
    op.drop_table("athlete")
    op.drop_table("age_group")
    op.drop_table("discipline")
    op.drop_table("season")
    op.drop_table("medal")
    op.drop_table("gender")
    op.drop_table("auth_session")
    op.drop_table("club_membership")
    op.drop_table("club")
    op.drop_table("user_account")
