from datetime import datetime

import pytest
from sqlalchemy.orm.exc import StaleDataError

from core.models import Comment, CommentType, TargetIssue
from core.repositories import (
    CommentRepository,
    DuplicateError,
    IssueRepository,
    NotFoundError,
    ProjectRepository,
    QueryOptions,
    TargetRepository,
    empty_summary,
)


def test_create_duplicate_raises_and_rolls_back(test_session, seed):
    owner = seed.user()
    target = seed.target(seed.project(owner))
    seed.issue(target, owner, uniq_id="same")

    repo = IssueRepository(test_session)
    with pytest.raises(DuplicateError):
        repo.create(
            TargetIssue(
                project_id=target.project_id,
                target_id=target.id,
                uniq_id="same",
                summary="again",
                severity="low",
            )
        )

    assert test_session.query(TargetIssue).count() == 1


def test_stale_flush_raises_not_found(test_session, monkeypatch):
    def stale():
        raise StaleDataError("UPDATE statement on table 'issues' expected to update 1 row(s)")

    monkeypatch.setattr(test_session, "flush", stale)

    with pytest.raises(NotFoundError):
        IssueRepository(test_session)._flush()


def test_filter_by_query_counts_before_paginating(test_session, seed):
    owner = seed.user()
    target = seed.target(seed.project(owner))
    created = [seed.issue(target, owner, created=datetime(2024, 1, day)) for day in (3, 1, 2)]

    repo = IssueRepository(test_session)
    issues, total = repo.list_issues(
        {"target": target.id},
        QueryOptions(sort=[("created", True)], skip=1, limit=1),
    )

    assert total == 3
    assert [i.id for i in issues] == [created[2].id]


def test_build_conditions_skips_unset_filters(test_session):
    repo = IssueRepository(test_session)

    assert repo.build_conditions({"severity": None, "muted": None}) == []
    assert len(repo.build_conditions({"severity": "high", "false": False})) == 2
    assert len(repo.build_conditions({}, search="xss")) == 1


class TestTargetSummary:
    def test_counts_only_active_issues(self, test_session, seed):
        owner = seed.user()
        target = seed.target(seed.project(owner))
        seed.issue(target, owner, severity="high")
        seed.issue(target, owner, severity="high", muted=True)
        seed.issue(target, owner, severity="medium", false_positive=True)
        seed.issue(target, owner, severity="low", resolved=True)
        seed.issue(target, owner, severity="info")

        summary = TargetRepository(test_session).compute_summary(target.id)

        assert summary == {"high": 1, "medium": 0, "low": 0, "info": 1}

    def test_empty_target(self, test_session, seed):
        target = seed.target(seed.project(seed.user()))

        assert TargetRepository(test_session).compute_summary(target.id) == empty_summary()


class TestProjectMembership:
    def test_owner_and_member(self, test_session, seed):
        owner = seed.user("owner")
        member = seed.user("member")
        stranger = seed.user("stranger")
        project = seed.project(owner)
        seed.member(project, member)

        repo = ProjectRepository(test_session)
        assert repo.is_member(project.id, owner.id)
        assert repo.is_member(project.id, member.id)
        assert not repo.is_member(project.id, stranger.id)

    def test_missing_project(self, test_session, seed):
        user = seed.user()
        assert not ProjectRepository(test_session).is_member(9999, user.id)


def test_comments_filter_by_type_and_link(test_session, seed):
    owner = seed.user()
    repo = CommentRepository(test_session)
    for n, link in enumerate((7, 8, 7)):
        repo.create(
            Comment(
                owner_id=owner.id,
                type=CommentType.issue.value,
                link=link,
                text=f"c{n}",
                created=datetime(2024, 1, 3 - n),
            )
        )

    comments, count = repo.filter_by(CommentType.issue.value, 7)

    assert count == 2
    assert [c.text for c in comments] == ["c2", "c0"]
