"""
Pydantic schemas for request and response validation.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from core.models import Severity


class Reference(BaseModel):
    url: str
    title: str | None = None


# =============================================================================
# Write entities
# =============================================================================


class TargetIssueEntity(BaseModel):
    """
    Write-side projection of an issue, used for both create and update.

    Every field is optional at the type level; ``validate_creating`` adds
    the rules that only apply when a new issue is reported.
    """

    model_config = ConfigDict(populate_by_name=True)

    target: str | int | None = None
    uniq_id: str | None = Field(default=None, max_length=255)
    summary: str | None = Field(default=None, max_length=1024)
    desc: str | None = None
    severity: Severity | None = None
    confirmed: bool | None = None
    false_positive: bool | None = Field(default=None, alias="false")
    muted: bool | None = None
    resolved: bool | None = None
    references: list[Reference] | None = None
    vector: dict[str, Any] | None = None

    def validate_creating(self) -> None:
        """
        Rules for the "creating" context.

        Raises:
            ValueError: Listing every violated rule
        """
        errors = []
        if not self.summary or not self.summary.strip():
            errors.append("summary is required")
        if self.severity is None:
            errors.append("severity is required")
        if errors:
            raise ValueError(", ".join(errors))


class CommentEntity(BaseModel):
    text: str = ""


# =============================================================================
# Responses
# =============================================================================


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: str
    user: int = Field(validation_alias=AliasChoices("user_id", "user"))
    created: datetime


class TargetIssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project: int = Field(validation_alias=AliasChoices("project_id", "project"))
    target: int = Field(validation_alias=AliasChoices("target_id", "target"))
    uniq_id: str | None = None
    summary: str
    desc: str | None = None
    severity: str
    confirmed: bool = False
    false_positive: bool = Field(
        default=False,
        validation_alias=AliasChoices("false_positive", "false"),
        serialization_alias="false",
    )
    muted: bool = False
    resolved: bool = False
    references: list[Reference] = Field(default_factory=list)
    vector: dict[str, Any] | None = None
    activities: list[ActivityResponse] = Field(default_factory=list)
    created: datetime
    updated: datetime

    @field_validator("references", mode="before")
    @classmethod
    def _references_default(cls, v: Any) -> Any:
        return v or []


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner: int = Field(validation_alias=AliasChoices("owner_id", "owner"))
    type: str
    link: int
    text: str
    created: datetime
    updated: datetime


class ListMeta(BaseModel):
    count: int
    previous: str | None = None
    next: str | None = None


class TargetIssueListResponse(ListMeta):
    results: list[TargetIssueResponse]


class CommentListResponse(ListMeta):
    results: list[CommentResponse]
