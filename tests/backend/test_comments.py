from core.models import Comment


def _count_comments(session_factory) -> int:
    session = session_factory()
    try:
        return session.query(Comment).count()
    finally:
        session.close()


def test_add_comment(authorized_client, owned_target, seed):
    client, current_user, session_factory = authorized_client
    issue = seed.issue(owned_target, current_user())

    resp = client.post(f"/api/v1/issues/{issue.id}/comments", json={"text": "Reproduced on staging"})
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["owner"] == current_user().id
    assert data["link"] == issue.id
    assert data["type"] == "issue"
    assert data["text"] == "Reproduced on staging"
    assert _count_comments(session_factory) == 1


def test_add_empty_comment_is_rejected(authorized_client, owned_target, seed):
    client, current_user, session_factory = authorized_client
    issue = seed.issue(owned_target, current_user())

    for body in ({"text": ""}, {}):
        resp = client.post(f"/api/v1/issues/{issue.id}/comments", json=body)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Text is required"

    assert _count_comments(session_factory) == 0


def test_comment_on_missing_issue(authorized_client):
    client, _, session_factory = authorized_client

    resp = client.post("/api/v1/issues/9999/comments", json={"text": "hello"})
    assert resp.status_code == 404
    assert _count_comments(session_factory) == 0


def test_list_comments_ignores_pagination(authorized_client, owned_target, seed):
    client, current_user, _ = authorized_client
    issue = seed.issue(owned_target, current_user())
    other = seed.issue(owned_target, current_user())

    texts = [f"note {n}" for n in range(5)]
    for text in texts:
        client.post(f"/api/v1/issues/{issue.id}/comments", json={"text": text})
    client.post(f"/api/v1/issues/{other.id}/comments", json={"text": "elsewhere"})

    resp = client.get(
        f"/api/v1/issues/{issue.id}/comments", params={"skip": 2, "limit": 1}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 5
    assert [c["text"] for c in data["results"]] == texts
    assert data["previous"] is None
    assert data["next"] is None


def test_list_comments_in_foreign_project(authorized_client, foreign_target, seed):
    client, _, _ = authorized_client
    issue = seed.issue(foreign_target, seed.user("reporter"))

    resp = client.get(f"/api/v1/issues/{issue.id}/comments")
    assert resp.status_code == 403
