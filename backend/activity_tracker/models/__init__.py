"""ORM models package.

Importing this module ensures every model is registered with the
SQLAlchemy ``Base.metadata`` so that Alembic autogenerate can detect
all tables.
"""

from activity_tracker.models.month import Month
from activity_tracker.models.organization import Organization
from activity_tracker.models.project import Project
from activity_tracker.models.pull_request import PullRequest
from activity_tracker.models.user import User

__all__ = [
    "Month",
    "Organization",
    "Project",
    "PullRequest",
    "User",
]
