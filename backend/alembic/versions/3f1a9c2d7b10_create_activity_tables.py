"""create users, months, organizations, projects, pull_requests

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2025-10-01 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("github_login", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("github_login"),
    )

    # month name の一意制約は MonthRegistry の ON CONFLICT 対象
    op.create_table(
        "months",
        sa.Column("month_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=7), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("month_id"),
        sa.UniqueConstraint("name", name="uq_months_name"),
    )

    op.create_table(
        "organizations",
        sa.Column("org_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("org_id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "projects",
        sa.Column("project_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("org_id", sa.BigInteger(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.org_id"]),
        sa.PrimaryKeyConstraint("project_id"),
    )

    op.create_table(
        "pull_requests",
        sa.Column("pr_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("month_id", sa.BigInteger(), nullable=False),
        sa.Column("org_id", sa.BigInteger(), nullable=True),
        sa.Column("project_id", sa.BigInteger(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column(
            "merged",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"]),
        sa.ForeignKeyConstraint(["month_id"], ["months.month_id"]),
        sa.ForeignKeyConstraint(["org_id"], ["organizations.org_id"]),
        sa.ForeignKeyConstraint(["project_id"], ["projects.project_id"]),
        sa.PrimaryKeyConstraint("pr_id"),
        sa.UniqueConstraint("user_id", "url", name="uq_pull_requests_user_url"),
    )
    op.create_index(
        "ix_pull_requests_user_id", "pull_requests", ["user_id"], unique=False,
    )
    op.create_index(
        "ix_pull_requests_month_id", "pull_requests", ["month_id"], unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_pull_requests_month_id", table_name="pull_requests")
    op.drop_index("ix_pull_requests_user_id", table_name="pull_requests")
    op.drop_table("pull_requests")
    op.drop_table("projects")
    op.drop_table("organizations")
    op.drop_table("months")
    op.drop_table("users")
