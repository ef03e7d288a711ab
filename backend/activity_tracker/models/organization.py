"""Organization ORM model."""

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from activity_tracker.database import Base


class Organization(Base):
    """Organization a pull request is attributed to.

    Assigned out-of-band; the ingestion path never populates it.
    """

    __tablename__ = "organizations"

    org_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )

    # --- Relationships ---
    projects: Mapped[list["Project"]] = relationship(  # noqa: F821
        back_populates="organization",
    )
    pull_requests: Mapped[list["PullRequest"]] = relationship(  # noqa: F821
        back_populates="org",
    )

    def __repr__(self) -> str:
        return f"<Organization(org_id={self.org_id}, name={self.name!r})>"
