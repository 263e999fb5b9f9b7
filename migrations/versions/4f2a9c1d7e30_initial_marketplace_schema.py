"""initial_marketplace_schema

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-18 10:12:41.318204

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=50), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("average_rating", sa.Float(), nullable=False),
        sa.Column("total_ratings", sa.Integer(), nullable=False),
        sa.Column("tasks_completed", sa.Integer(), nullable=False),
        *timestamps(),
        sa.CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_profiles_average_rating_range",
        ),
        sa.CheckConstraint("total_ratings >= 0", name="ck_profiles_total_ratings"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("poster_id", sa.Uuid(), nullable=False),
        sa.Column("assigned_to", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("urgency", sa.String(length=50), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
        sa.CheckConstraint("price > 0", name="ck_jobs_price_positive"),
        sa.CheckConstraint(
            "status IN ('open', 'in_progress', 'completed', 'cancelled')",
            name="ck_jobs_status",
        ),
        sa.CheckConstraint(
            "(assigned_to IS NULL) = (status IN ('open', 'cancelled'))",
            name="ck_jobs_assignee_matches_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in (
        "poster_id",
        "assigned_to",
        "price",
        "urgency",
        "location",
        "category",
        "status",
    ):
        op.create_index(f"ix_jobs_{column}", "jobs", [column])
    op.create_index("ix_jobs_status_created_at", "jobs", ["status", "created_at"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("job_id", sa.Uuid(), nullable=False),
        sa.Column("rater_id", sa.Uuid(), nullable=False),
        sa.Column("rated_user_id", sa.Uuid(), nullable=False),
        sa.Column("rating_type", sa.String(length=20), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False),
        sa.Column("review", sa.Text(), nullable=True),
        *timestamps(),
        sa.CheckConstraint("value >= 1 AND value <= 5", name="ck_ratings_value_range"),
        sa.CheckConstraint(
            "rating_type IN ('poster_to_helper', 'helper_to_poster')",
            name="ck_ratings_type",
        ),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("job_id", "rating_type", name="uq_ratings_job_direction"),
    )
    for column in ("job_id", "rater_id", "rated_user_id"):
        op.create_index(f"ix_ratings_{column}", "ratings", [column])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("ref_id", sa.Uuid(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index(
        "ix_notifications_user_unread", "notifications", ["user_id", "is_read"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("notifications")
    op.drop_table("ratings")
    op.drop_table("jobs")
    op.drop_table("profiles")
