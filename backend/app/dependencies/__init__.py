"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Repositories
- Issue resolution (the guard shared by every issue-scoped route)
- List helpers (paginator, sorter)
"""

from fastapi import Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from core.config import get_settings
from core.constants import ISSUE_SORT_FIELDS, NOT_FOUND, WRONG_ID
from core.db import get_db
from core.models import TargetIssue, User
from core.pagination import Paginator, Sorter
from core.repositories import IssueRepository

from ..auth.dependencies import get_current_user
from ..services.issue_service import is_id
from ..services.permission_service import require_project_permission

# =============================================================================
# Repository Dependencies
# =============================================================================


def get_issue_repository(db: Session = Depends(get_db)) -> IssueRepository:
    """Get IssueRepository instance."""
    return IssueRepository(db)


# =============================================================================
# List Helpers
# =============================================================================


def get_paginator() -> Paginator:
    settings = get_settings()
    return Paginator(
        default_limit=settings.pagination_default_limit,
        max_limit=settings.pagination_max_limit,
    )


issue_sorter = Sorter(*ISSUE_SORT_FIELDS)


# =============================================================================
# Issue Guard
# =============================================================================


def take_issue(
    issue_id: str = Path(..., description="Issue id"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    issue_repo: IssueRepository = Depends(get_issue_repository),
) -> TargetIssue:
    """
    Resolve the issue named in the path and check the caller may act on it.

    Runs on the request session, so the handler sees the same loaded issue.

    Raises:
        HTTPException: 400 for a malformed id, 404 when the issue does not
            exist, 401/403 without permission on the issue's project
    """
    if not is_id(issue_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=WRONG_ID)

    issue = issue_repo.get_by_id(int(issue_id))
    if issue is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    require_project_permission(db, current_user, issue.project_id)
    return issue


__all__ = [
    "get_issue_repository",
    "get_paginator",
    "issue_sorter",
    "take_issue",
]
