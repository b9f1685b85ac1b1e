"""
Issue repository.
"""

from typing import Any

from sqlalchemy import or_

from core.models import TargetIssue

from .base import BaseRepository, QueryOptions

# Filter keys that map one-to-one onto issue columns
ISSUE_FILTER_COLUMNS = {
    "target": "target_id",
    "project": "project_id",
    "severity": "severity",
    "uniq_id": "uniq_id",
    "confirmed": "confirmed",
    "false": "false_positive",
    "muted": "muted",
    "resolved": "resolved",
}


def _escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class IssueRepository(BaseRepository[TargetIssue]):
    """Repository for TargetIssue operations."""

    model = TargetIssue

    def build_conditions(self, filters: dict[str, Any], search: str | None = None) -> list[Any]:
        """
        Translate filter values into SQL conditions.

        Args:
            filters: Filter dictionary keyed by ISSUE_FILTER_COLUMNS; None values are skipped
            search: Optional free text matched against summary and description

        Returns:
            List of SQLAlchemy clauses
        """
        conditions: list[Any] = []
        for key, column_name in ISSUE_FILTER_COLUMNS.items():
            value = filters.get(key)
            if value is None:
                continue
            conditions.append(getattr(TargetIssue, column_name) == value)

        if search:
            pattern = f"%{_escape_like(search)}%"
            conditions.append(
                or_(
                    TargetIssue.summary.ilike(pattern, escape="\\"),
                    TargetIssue.desc.ilike(pattern, escape="\\"),
                )
            )
        return conditions

    def list_issues(
        self,
        filters: dict[str, Any],
        opts: QueryOptions,
        search: str | None = None,
    ) -> tuple[list[TargetIssue], int]:
        """Filtered, sorted, paginated issue listing. Returns (issues, total)."""
        return self.filter_by_query(self.build_conditions(filters, search), opts)

