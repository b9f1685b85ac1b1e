from datetime import datetime, timedelta, timezone

from backend.app.auth.jwt import create_access_token, decode_access_token
from core.repositories import TokenBlacklistRepository


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_list_requires_authentication(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/v1/issues")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Not authenticated", "status_code": 401}
    assert resp.headers["www-authenticate"] == "Bearer"


def test_every_route_requires_authentication(test_app_client):
    client, _ = test_app_client

    for method, path in (
        ("post", "/api/v1/issues"),
        ("get", "/api/v1/issues/1"),
        ("put", "/api/v1/issues/1"),
        ("delete", "/api/v1/issues/1"),
        ("get", "/api/v1/issues/1/comments"),
        ("post", "/api/v1/issues/1/comments"),
    ):
        kwargs = {"json": {}} if method in ("post", "put") else {}
        resp = getattr(client, method)(path, **kwargs)
        assert resp.status_code == 401, (method, path)


def test_garbage_token_is_rejected(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/v1/issues", headers=_bearer("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid authentication credentials"


def test_valid_token_is_accepted(test_app_client, seed):
    client, _ = test_app_client
    user = seed.user("alice")

    resp = client.get("/api/v1/issues", headers=_bearer(create_access_token({"sub": str(user.id)})))
    assert resp.status_code == 200


def test_token_from_cookie(test_app_client, seed):
    client, _ = test_app_client
    user = seed.user("alice")
    token = create_access_token({"sub": str(user.id)})

    resp = client.get("/api/v1/issues", headers={"Cookie": f"access_token={token}"})
    assert resp.status_code == 200


def test_token_for_unknown_user(test_app_client):
    client, _ = test_app_client

    resp = client.get("/api/v1/issues", headers=_bearer(create_access_token({"sub": "4242"})))
    assert resp.status_code == 401
    assert resp.json()["detail"] == "User not found"


def test_revoked_token_is_rejected(test_app_client, seed):
    client, session_factory = test_app_client
    user = seed.user("alice")
    token = create_access_token({"sub": str(user.id)})

    session = session_factory()
    TokenBlacklistRepository(session).revoke(
        decode_access_token(token)["jti"],
        datetime.now(timezone.utc) + timedelta(hours=1),
    )
    session.commit()
    session.close()

    resp = client.get("/api/v1/issues", headers=_bearer(token))
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has been revoked"


def test_authenticated_non_member_is_forbidden(test_app_client, seed):
    client, _ = test_app_client
    owner = seed.user("owner")
    stranger = seed.user("stranger")
    target = seed.target(seed.project(owner))
    issue = seed.issue(target, owner)

    resp = client.get(
        f"/api/v1/issues/{issue.id}",
        headers=_bearer(create_access_token({"sub": str(stranger.id)})),
    )
    assert resp.status_code == 403

    resp = client.get(
        f"/api/v1/issues/{issue.id}",
        headers=_bearer(create_access_token({"sub": str(owner.id)})),
    )
    assert resp.status_code == 200
