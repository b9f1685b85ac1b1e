"""
Project-level permission checks.

A user may act on a project's issues when they are an admin, the project
owner, or a project member. A missing project grants nothing.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import FORBIDDEN, NOT_AUTHENTICATED
from core.logging import get_logger
from core.models import User
from core.repositories import ProjectRepository

logger = get_logger("api.permissions")


def has_project_permission(db: Session, user: User | None, project_id: int) -> bool:
    if user is None:
        return False
    if user.is_admin:
        return True
    return ProjectRepository(db).is_member(project_id, user.id)


def require_project_permission(db: Session, user: User | None, project_id: int) -> None:
    """
    Raise unless the user may act on the project.

    Raises:
        HTTPException: 401 when there is no user, 403 when permission is missing
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not has_project_permission(db, user, project_id):
        logger.warning("project_permission_denied", user_id=user.id, project_id=project_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
