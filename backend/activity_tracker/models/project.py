"""Project ORM model."""

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from activity_tracker.database import Base


class Project(Base):
    """Project a pull request is attributed to, optionally under an organization."""

    __tablename__ = "projects"

    project_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )
    org_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("organizations.org_id"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # --- Relationships ---
    organization: Mapped["Organization | None"] = relationship(  # noqa: F821
        back_populates="projects",
    )
    pull_requests: Mapped[list["PullRequest"]] = relationship(  # noqa: F821
        back_populates="project",
    )

    def __repr__(self) -> str:
        return f"<Project(project_id={self.project_id}, name={self.name!r})>"
