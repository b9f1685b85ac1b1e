"""
Issue endpoints.

Every route is protected by token authentication and authorization at the
router level; issue-scoped routes additionally resolve the issue through
``take_issue``.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from core.config import get_settings
from core.constants import MAX_ID
from core.db import get_db
from core.models import Severity, TargetIssue, User
from core.pagination import Paginator
from core.repositories import QueryOptions

from ..auth.dependencies import get_current_user, get_request_user
from ..dependencies import get_paginator, issue_sorter, take_issue
from ..schemas import (
    CommentEntity,
    CommentListResponse,
    CommentResponse,
    TargetIssueEntity,
    TargetIssueListResponse,
    TargetIssueResponse,
)
from ..services import issue_service

router = APIRouter(
    prefix="/issues",
    tags=["issues"],
    dependencies=[Depends(get_request_user), Depends(get_current_user)],
)

# Documented error statuses
_AUTH = {
    401: {"description": "Not authenticated"},
    403: {"description": "No permission on the project"},
}
_BAD = {400: {"description": "Malformed id, query or entity"}}
_MISSING = {404: {"description": "Issue not found"}}
_DUPLICATE = {409: {"description": "Duplicate issue"}}
_STORAGE = {500: {"description": "Database error"}}


@router.get(
    "",
    response_model=TargetIssueListResponse,
    responses={**_BAD, **_AUTH, **_STORAGE},
)
def list_issues(
    request: Request,
    target: int | None = Query(None, ge=1, le=MAX_ID, description="Filter by target id"),
    project: int | None = Query(None, ge=1, le=MAX_ID, description="Filter by project id"),
    severity: Severity | None = Query(None, description="Filter by severity"),
    uniq_id: str | None = Query(None, description="Filter by fingerprint"),
    confirmed: bool | None = Query(None),
    false_positive: bool | None = Query(None, alias="false", description="Filter by false positive flag"),
    muted: bool | None = Query(None),
    resolved: bool | None = Query(None),
    search: str | None = Query(None, description="Search in summary and description"),
    ordering: str | None = Query(None, description=issue_sorter.description),
    skip: int | None = Query(None, le=MAX_ID, description="Number of results to skip"),
    limit: int | None = Query(None, le=MAX_ID, description="Number of results per page"),
    paginator: Paginator = Depends(get_paginator),
    db: Session = Depends(get_db),
):
    """List issues with filtering, sorting and pagination."""
    try:
        sort = issue_sorter.parse(ordering)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None

    skip, limit = paginator.parse(skip, limit)
    filters = {
        "target": target,
        "project": project,
        "severity": severity.value if severity else None,
        "uniq_id": uniq_id,
        "confirmed": confirmed,
        "false": false_positive,
        "muted": muted,
        "resolved": resolved,
    }
    if not get_settings().text_search_enable:
        search = None

    issues, count = issue_service.list_issues(
        db, filters, search, QueryOptions(sort=sort, skip=skip, limit=limit)
    )
    previous, next_url = paginator.urls(request.url, skip, limit, count)

    return TargetIssueListResponse(
        count=count,
        previous=previous,
        next=next_url,
        results=[TargetIssueResponse.model_validate(i) for i in issues],
    )


@router.post(
    "",
    response_model=TargetIssueResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD, **_AUTH, **_DUPLICATE, **_STORAGE},
)
def create_issue(
    entity: TargetIssueEntity,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Report a new issue against a target."""
    issue = issue_service.create_issue(db, current_user, entity)
    return TargetIssueResponse.model_validate(issue)


@router.get(
    "/{issue_id}",
    response_model=TargetIssueResponse,
    responses={**_BAD, **_AUTH, **_MISSING, **_STORAGE},
)
def get_issue(issue: TargetIssue = Depends(take_issue)):
    return TargetIssueResponse.model_validate(issue)


@router.put(
    "/{issue_id}",
    response_model=TargetIssueResponse,
    responses={**_BAD, **_AUTH, **_MISSING, **_DUPLICATE, **_STORAGE},
)
def update_issue(
    entity: TargetIssueEntity,
    issue: TargetIssue = Depends(take_issue),
    db: Session = Depends(get_db),
):
    """Merge the provided fields into the issue."""
    issue = issue_service.update_issue(db, issue, entity)
    return TargetIssueResponse.model_validate(issue)


@router.delete(
    "/{issue_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_BAD, **_AUTH, **_MISSING, **_STORAGE},
)
def delete_issue(
    issue: TargetIssue = Depends(take_issue),
    db: Session = Depends(get_db),
):
    issue_service.delete_issue(db, issue)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Comments
# =============================================================================


@router.get(
    "/{issue_id}/comments",
    response_model=CommentListResponse,
    responses={**_BAD, **_AUTH, **_MISSING, **_STORAGE},
)
def list_issue_comments(
    issue: TargetIssue = Depends(take_issue),
    db: Session = Depends(get_db),
):
    """All comments on the issue, oldest first. Not paginated."""
    comments, count = issue_service.list_comments(db, issue)
    return CommentListResponse(
        count=count,
        results=[CommentResponse.model_validate(c) for c in comments],
    )


@router.post(
    "/{issue_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD, **_AUTH, **_MISSING, **_STORAGE},
)
def add_issue_comment(
    entity: CommentEntity,
    issue: TargetIssue = Depends(take_issue),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = issue_service.add_comment(db, current_user, issue, entity.text)
    return CommentResponse.model_validate(comment)
