"""Create posts table owned by users."""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0002_posts"
down_revision = "0001_users"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create posts with author, expiry and listing indexes."""

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_posts_author_id", "posts", ["author_id"])
    op.create_index("ix_posts_expires_at", "posts", ["expires_at"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])


def downgrade() -> None:
    """Drop posts table and its indexes."""

    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_index("ix_posts_expires_at", table_name="posts")
    op.drop_index("ix_posts_author_id", table_name="posts")
    op.drop_table("posts")
