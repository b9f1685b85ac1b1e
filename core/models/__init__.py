"""
SQLAlchemy models for the Bearded issues service.

Usage:
    from core.models import TargetIssue, Target, Comment
"""

from core.db import Base
from .comment import Comment, CommentType
from .issue import ActivityType, IssueActivity, Severity, TargetIssue
from .project import Project, ProjectMember
from .target import TARGET_TYPE_MOBILE, TARGET_TYPE_WEB, Target
from .user import TokenBlacklist, User

__all__ = [
    # Base
    "Base",
    # User
    "User",
    "TokenBlacklist",
    # Project
    "Project",
    "ProjectMember",
    # Target
    "Target",
    "TARGET_TYPE_WEB",
    "TARGET_TYPE_MOBILE",
    # Issue
    "TargetIssue",
    "IssueActivity",
    "Severity",
    "ActivityType",
    # Comment
    "Comment",
    "CommentType",
]
