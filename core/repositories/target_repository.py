"""
Target repository with summary maintenance.
"""

from sqlalchemy import func

from core.logging import get_logger
from core.models import Severity, Target, TargetIssue

from .base import BaseRepository

logger = get_logger("repository.target")


def empty_summary() -> dict[str, int]:
    return {severity.value: 0 for severity in Severity}


class TargetRepository(BaseRepository[Target]):
    """Repository for Target operations."""

    model = Target

    def compute_summary(self, target_id: int) -> dict[str, int]:
        """Count active issues of a target per severity."""
        rows = (
            self.session.query(TargetIssue.severity, func.count(TargetIssue.id))
            .filter(
                TargetIssue.target_id == target_id,
                TargetIssue.false_positive.is_(False),
                TargetIssue.muted.is_(False),
                TargetIssue.resolved.is_(False),
            )
            .group_by(TargetIssue.severity)
            .all()
        )
        summary = empty_summary()
        for severity, count in rows:
            summary[severity] = count
        return summary

    def update_summary(self, target: Target) -> Target:
        """Rebuild the denormalized issue summary of a target."""
        target.summary = self.compute_summary(target.id)
        self._flush()
        logger.debug("target_summary_updated", target_id=target.id, summary=target.summary)
        return target
