"""Month ORM model."""

from datetime import datetime

from sqlalchemy import BigInteger, String, TIMESTAMP, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from activity_tracker.database import Base


class Month(Base):
    """Calendar month label (``YYYY-MM``) that pull requests are filed under.

    Rows are created lazily by ``MonthRegistry`` and are never updated or
    deleted.  ``uq_months_name`` is the conflict target of the registry's
    find-or-create insert.
    """

    __tablename__ = "months"
    __table_args__ = (
        UniqueConstraint("name", name="uq_months_name"),
    )

    month_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # --- Relationships ---
    pull_requests: Mapped[list["PullRequest"]] = relationship(  # noqa: F821
        back_populates="month",
    )

    def __repr__(self) -> str:
        return f"<Month(month_id={self.month_id}, name={self.name!r})>"
