"""
Issue-related SQLAlchemy models.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import Base


class Severity(str, Enum):
    """Issue severity, highest first."""

    high = "high"
    medium = "medium"
    low = "low"
    info = "info"


class ActivityType(str, Enum):
    reported = "reported"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TargetIssue(Base):
    """
    A finding filed against a target.

    The issue belongs to the target's project; ``project_id`` is copied from
    the target when the issue is created and never changes afterwards.
    ``uniq_id`` is an optional fingerprint that must be unique per target.
    """

    __tablename__ = "issues"
    __table_args__ = (
        UniqueConstraint("target_id", "uniq_id", name="uq_issues_target_uniq_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), index=True)
    target_id: Mapped[int] = mapped_column(ForeignKey("targets.id"), index=True)
    uniq_id: Mapped[Optional[str]] = mapped_column(String(255))
    summary: Mapped[str] = mapped_column(String(1024), default="")
    desc: Mapped[Optional[str]] = mapped_column(Text)
    severity: Mapped[str] = mapped_column(String(16), default=Severity.info.value, index=True)

    confirmed: Mapped[bool] = mapped_column(Boolean, default=False)
    false_positive: Mapped[bool] = mapped_column(Boolean, default=False)
    muted: Mapped[bool] = mapped_column(Boolean, default=False)
    resolved: Mapped[bool] = mapped_column(Boolean, default=False)

    references: Mapped[Optional[List[Dict]]] = mapped_column(JSON)
    vector: Mapped[Optional[Dict]] = mapped_column(JSON)

    created: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, index=True)
    updated: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow, index=True)

    activities: Mapped[List["IssueActivity"]] = relationship(
        "IssueActivity",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="IssueActivity.id",
        lazy="selectin",
    )

    def add_user_report_activity(self, user_id: int) -> "IssueActivity":
        activity = IssueActivity(type=ActivityType.reported.value, user_id=user_id)
        self.activities.append(activity)
        return activity


class IssueActivity(Base):
    """One entry of an issue's activity log."""

    __tablename__ = "issue_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    issue_id: Mapped[int] = mapped_column(ForeignKey("issues.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(32))
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    created: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    issue: Mapped[TargetIssue] = relationship("TargetIssue", back_populates="activities")
