"""Initial schema and seed data for PRS Online

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

This is the initial migration that creates all necessary tables and seeds
reference data for PRS Online. This includes:
- Account tables (users, profiles)
- Reference tables (countries, firms)
- Practice review and upcoming review notice tables
- Default country list

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

COUNTRIES = [
    ("AU", "Australia"),
    ("CA", "Canada"),
    ("DE", "Germany"),
    ("FR", "France"),
    ("GB", "United Kingdom"),
    ("IE", "Ireland"),
    ("IN", "India"),
    ("JP", "Japan"),
    ("MX", "Mexico"),
    ("NZ", "New Zealand"),
    ("US", "United States"),
]


def upgrade() -> None:
    """Create all tables and seed reference data."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(128), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("password", sa.String(128), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("refresh_token", sa.String(255), nullable=True),
        sa.Column("refresh_expires", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
        sa.Index("ix_users_username", "username"),
        sa.Index("ix_users_email", "email"),
        sa.Index("ix_users_role_id", "role_id"),
        sa.Index("ix_users_refresh_token", "refresh_token"),
    )

    # Create profiles table
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(128), nullable=True),
        sa.Column("last_name", sa.String(128), nullable=True),
        sa.Column("picture", sa.String(1024), nullable=True),
        sa.Column("country", sa.String(8), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id"),
        sa.Index("ix_profiles_user_id", "user_id"),
    )

    # Create countries table
    countries_table = op.create_table(
        "countries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(8), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
        sa.Index("ix_countries_code", "code"),
    )

    # Create firms table
    op.create_table(
        "firms",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("firm_number", sa.String(32), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("firm_number"),
        sa.Index("ix_firms_name", "name"),
    )

    # Create practice_reviews table
    op.create_table(
        "practice_reviews",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("pr_number", sa.String(32), nullable=False),
        sa.Column("firm_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("contact_name", sa.String(256), nullable=True),
        sa.Column("contact_email", sa.String(256), nullable=True),
        sa.Column("review_type", sa.String(64), nullable=False, server_default="Full"),
        sa.Column("has_increased_risk", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["firm_id"], ["firms.id"]),
        sa.UniqueConstraint("pr_number"),
        sa.Index("ix_practice_reviews_pr_number", "pr_number"),
        sa.Index("ix_practice_reviews_firm_id", "firm_id"),
        sa.Index("ix_practice_reviews_start_date", "start_date"),
    )

    # Create upcoming_review_notices table
    op.create_table(
        "upcoming_review_notices",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("practice_review_id", sa.Integer(), nullable=False),
        sa.Column("stage", sa.String(32), nullable=False, server_default="GenerateNotices"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("notice_html", sa.Text(), nullable=True),
        sa.Column("is_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_modified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_reviewed_at_generate_stage", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_reviewed_at_approval_stage", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("generated_at", sa.DateTime(), nullable=True),
        sa.Column("released_at", sa.DateTime(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("approved_by_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["practice_review_id"], ["practice_reviews.id"]),
        sa.ForeignKeyConstraint(["approved_by_user_id"], ["users.id"]),
        sa.UniqueConstraint("practice_review_id"),
        sa.Index("ix_upcoming_review_notices_practice_review_id", "practice_review_id"),
        sa.Index("ix_upcoming_review_notices_stage", "stage"),
    )

    # Seed countries
    op.bulk_insert(countries_table, [{"code": code, "name": name} for code, name in COUNTRIES])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("upcoming_review_notices")
    op.drop_table("practice_reviews")
    op.drop_table("firms")
    op.drop_table("countries")
    op.drop_table("profiles")
    op.drop_table("users")
