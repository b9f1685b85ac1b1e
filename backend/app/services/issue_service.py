"""
Issue service - bridges FastAPI endpoints with the issue repositories.

Handlers stay thin: they parse the request and call into this module, which
validates, checks project permission, persists and maps persistence errors
onto HTTP statuses.
"""

from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import DUPLICATE, MAX_ID, NOT_FOUND, TARGET_NOT_FOUND, TARGET_WRONG, TEXT_REQUIRED
from core.logging import get_logger
from core.models import Comment, CommentType, TargetIssue, User
from core.repositories import (
    CommentRepository,
    DuplicateError,
    IssueRepository,
    NotFoundError,
    QueryOptions,
    TargetRepository,
)

from ..schemas import TargetIssueEntity
from .permission_service import require_project_permission
from .summary_service import schedule_summary_update

logger = get_logger("api.issue_service")

# Entity fields copied verbatim onto the issue
_PLAIN_FIELDS = ("uniq_id", "summary", "desc", "vector")
# Fields whose change invalidates the target summary
_STATUS_FIELDS = ("confirmed", "false_positive", "muted", "resolved")
_MAX_ID_DIGITS = len(str(MAX_ID))


def is_id(value: Any) -> bool:
    """True for a positive integer, or a string of ASCII digits holding one, that fits an id column."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return 0 < value <= MAX_ID
    if isinstance(value, str):
        # isdigit alone admits non-ASCII digits such as "²"
        if not (value.isascii() and value.isdigit()) or len(value) > _MAX_ID_DIGITS:
            return False
        return 0 < int(value) <= MAX_ID
    return False


def apply_issue_entity(entity: TargetIssueEntity, issue: TargetIssue) -> bool:
    """
    Merge provided entity fields into an issue.

    Fields left as None are not touched. ``target`` is ignored: an issue
    never moves between targets.

    Returns:
        True if severity or a status flag changed, i.e. the target summary
        must be rebuilt
    """
    rebuild_summary = False

    for name in _PLAIN_FIELDS:
        value = getattr(entity, name)
        if value is not None:
            setattr(issue, name, value)

    if entity.references is not None:
        issue.references = [ref.model_dump() for ref in entity.references]

    if entity.severity is not None and entity.severity.value != issue.severity:
        issue.severity = entity.severity.value
        rebuild_summary = True

    for name in _STATUS_FIELDS:
        value = getattr(entity, name)
        if value is not None and value != getattr(issue, name):
            setattr(issue, name, value)
            rebuild_summary = True

    return rebuild_summary


def _duplicate() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE)


def list_issues(
    db: Session,
    filters: dict[str, Any],
    search: str | None,
    opts: QueryOptions,
) -> tuple[list[TargetIssue], int]:
    """Filtered listing. Returns (issues, total count)."""
    return IssueRepository(db).list_issues(filters, opts, search=search)


def create_issue(db: Session, user: User, entity: TargetIssueEntity) -> TargetIssue:
    """
    Report a new issue against an existing target.

    Raises:
        HTTPException: 400 for a bad/missing target or failed validation,
            401/403 without project permission, 409 on a duplicate
    """
    if not is_id(entity.target):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=TARGET_WRONG)

    try:
        entity.validate_creating()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Validation error: {e}"
        ) from None

    target = TargetRepository(db).get_by_id(int(entity.target))
    if target is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=TARGET_NOT_FOUND)

    require_project_permission(db, user, target.project_id)

    issue = TargetIssue(project_id=target.project_id, target_id=target.id)
    apply_issue_entity(entity, issue)
    issue.add_user_report_activity(user.id)

    try:
        IssueRepository(db).create(issue)
    except DuplicateError:
        logger.info("issue_duplicate", target_id=target.id, uniq_id=entity.uniq_id)
        raise _duplicate() from None

    db.commit()
    logger.info("issue_created", issue_id=issue.id, target_id=target.id, user_id=user.id)

    schedule_summary_update(db, target.id)
    return issue


def update_issue(db: Session, issue: TargetIssue, entity: TargetIssueEntity) -> TargetIssue:
    """
    Merge an entity into an existing issue.

    On a duplicate or vanished row the session is rolled back, so the stored
    issue keeps its previous values.

    Raises:
        HTTPException: 404 if the issue disappeared, 409 on a duplicate
    """
    rebuild_summary = apply_issue_entity(entity, issue)

    try:
        IssueRepository(db).update(issue)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND) from None
    except DuplicateError:
        logger.info("issue_duplicate", issue_id=issue.id, uniq_id=entity.uniq_id)
        raise _duplicate() from None

    db.commit()
    logger.info("issue_updated", issue_id=issue.id, rebuild_summary=rebuild_summary)

    if rebuild_summary:
        schedule_summary_update(db, issue.target_id)
    return issue


def delete_issue(db: Session, issue: TargetIssue) -> None:
    issue_id = issue.id
    IssueRepository(db).delete(issue)
    db.commit()
    logger.info("issue_deleted", issue_id=issue_id)


def list_comments(db: Session, issue: TargetIssue) -> tuple[list[Comment], int]:
    return CommentRepository(db).filter_by(CommentType.issue.value, issue.id)


def add_comment(db: Session, user: User, issue: TargetIssue, text: str) -> Comment:
    """
    Attach a comment by the user to the issue.

    Raises:
        HTTPException: 400 when text is empty
    """
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=TEXT_REQUIRED)

    comment = Comment(
        owner_id=user.id,
        type=CommentType.issue.value,
        link=issue.id,
        text=text,
    )
    CommentRepository(db).create(comment)
    db.commit()
    logger.info("issue_comment_added", issue_id=issue.id, comment_id=comment.id)
    return comment
