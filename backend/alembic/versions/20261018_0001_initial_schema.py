"""initial schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "store_submissions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=False),
        sa.Column("category", sa.String(length=128), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_store_submissions_user_id", "store_submissions", ["user_id"], unique=False)
    op.create_index("ix_store_submissions_status", "store_submissions", ["status"], unique=False)
    op.create_index("ix_store_submissions_created_at", "store_submissions", ["created_at"], unique=False)

    op.create_table(
        "stores",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=False),
        sa.Column("road_address", sa.String(length=512), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("market_name", sa.String(length=255), nullable=True),
        sa.Column("category", sa.String(length=128), nullable=True),
        sa.Column("lat", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("lng", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("card_available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("mobile_available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("paper_available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("source_submission_id", sa.Integer(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["source_submission_id"], ["store_submissions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source_submission_id"),
    )
    op.create_index("ix_stores_name", "stores", ["name"], unique=False)
    op.create_index("ix_stores_address", "stores", ["address"], unique=False)
    op.create_index("ix_stores_created_at", "stores", ["created_at"], unique=False)
    op.create_index("ix_stores_lat_lng", "stores", ["lat", "lng"], unique=False)

    op.create_table(
        "store_confirmations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("submission_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["submission_id"], ["store_submissions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("submission_id", "user_id", name="uq_store_confirmations_submission_user"),
    )
    op.create_index("ix_store_confirmations_submission_id", "store_confirmations", ["submission_id"], unique=False)
    op.create_index("ix_store_confirmations_user_id", "store_confirmations", ["user_id"], unique=False)
    op.create_index("ix_store_confirmations_created_at", "store_confirmations", ["created_at"], unique=False)

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("voucher_type", sa.String(length=16), nullable=True),
        sa.Column("min_amount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("image_url", sa.String(length=1024), nullable=True),
        _created_at(),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reviews_store_id", "reviews", ["store_id"], unique=False)
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"], unique=False)
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"], unique=False)

    op.create_table(
        "review_likes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("review_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["review_id"], ["reviews.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("review_id", "user_id", name="uq_review_likes_review_user"),
    )
    op.create_index("ix_review_likes_review_id", "review_likes", ["review_id"], unique=False)
    op.create_index("ix_review_likes_user_id", "review_likes", ["user_id"], unique=False)
    op.create_index("ix_review_likes_created_at", "review_likes", ["created_at"], unique=False)

    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "user_id", name="uq_favorites_store_user"),
    )
    op.create_index("ix_favorites_store_id", "favorites", ["store_id"], unique=False)
    op.create_index("ix_favorites_user_id", "favorites", ["user_id"], unique=False)
    op.create_index("ix_favorites_created_at", "favorites", ["created_at"], unique=False)

    op.create_table(
        "closure_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("store_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("store_id", "user_id", name="uq_closure_reports_store_user"),
    )
    op.create_index("ix_closure_reports_store_id", "closure_reports", ["store_id"], unique=False)
    op.create_index("ix_closure_reports_user_id", "closure_reports", ["user_id"], unique=False)
    op.create_index("ix_closure_reports_created_at", "closure_reports", ["created_at"], unique=False)


def downgrade() -> None:
    for table in ("closure_reports", "favorites", "review_likes", "reviews", "store_confirmations"):
        op.drop_table(table)
    op.drop_index("ix_stores_lat_lng", table_name="stores")
    op.drop_table("stores")
    op.drop_table("store_submissions")
