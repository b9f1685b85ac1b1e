"""
Repository pattern implementations for data access.

Repositories wrap a request-scoped SQLAlchemy session and classify
persistence failures as NotFoundError / DuplicateError.

Usage:
    from core.repositories import IssueRepository
    from core.db import db

    with db.session() as session:
        repo = IssueRepository(session)
        issue = repo.get_by_id(issue_id)
"""

from .base import BaseRepository, DuplicateError, NotFoundError, QueryOptions, RepositoryError
from .comment_repository import CommentRepository
from .issue_repository import ISSUE_FILTER_COLUMNS, IssueRepository
from .project_repository import ProjectRepository
from .target_repository import TargetRepository, empty_summary
from .user_repository import TokenBlacklistRepository, UserRepository

__all__ = [
    "BaseRepository",
    "QueryOptions",
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "IssueRepository",
    "ISSUE_FILTER_COLUMNS",
    "TargetRepository",
    "empty_summary",
    "CommentRepository",
    "ProjectRepository",
    "UserRepository",
    "TokenBlacklistRepository",
]
