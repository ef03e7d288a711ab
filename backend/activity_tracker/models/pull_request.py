"""PullRequest ORM model."""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    ForeignKey,
    String,
    TIMESTAMP,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from activity_tracker.database import Base


class PullRequest(Base):
    """GitHub pull request authored by a tracked user in a given month.

    Records are insert-only.  ``uq_pull_requests_user_url`` lets a repeated
    ingestion of the same month skip PRs that are already stored.
    """

    __tablename__ = "pull_requests"
    __table_args__ = (
        UniqueConstraint("user_id", "url", name="uq_pull_requests_user_url"),
    )

    pr_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
    )
    month_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("months.month_id"),
        nullable=False,
        index=True,
    )
    org_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("organizations.org_id"),
        nullable=True,
    )
    project_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("projects.project_id"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    # Approximation: "closed" on the issues search API, not a real merge.
    merged: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default="false",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # --- Relationships ---
    user: Mapped["User"] = relationship(  # noqa: F821
        back_populates="pull_requests",
    )
    month: Mapped["Month"] = relationship(  # noqa: F821
        back_populates="pull_requests",
    )
    org: Mapped["Organization | None"] = relationship(  # noqa: F821
        back_populates="pull_requests",
    )
    project: Mapped["Project | None"] = relationship(  # noqa: F821
        back_populates="pull_requests",
    )

    def __repr__(self) -> str:
        return (
            f"<PullRequest(pr_id={self.pr_id}, "
            f"user_id={self.user_id}, month_id={self.month_id})>"
        )
