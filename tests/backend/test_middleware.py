"""
Tests for API middleware and exception handlers.

Tests:
- Request ID middleware
- Error body shape for storage and unhandled errors
- Health endpoints
"""

from sqlalchemy.exc import OperationalError, SQLAlchemyError


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    def _app(self):
        from starlette.applications import Starlette
        from starlette.responses import JSONResponse
        from starlette.routing import Route

        from backend.app.middleware.request_id import RequestIDMiddleware

        async def echo(request):
            return JSONResponse({"request_id": request.state.request_id})

        app = Starlette(routes=[Route("/test", echo)])
        app.add_middleware(RequestIDMiddleware)
        return app

    def test_generates_request_id(self):
        """A request without the header gets a fresh ID echoed back."""
        from starlette.testclient import TestClient

        client = TestClient(self._app())
        response = client.get("/test")

        request_id = response.headers["X-Request-ID"]
        assert request_id
        assert response.json()["request_id"] == request_id

    def test_reuses_incoming_request_id(self):
        from starlette.testclient import TestClient

        client = TestClient(self._app())
        response = client.get("/test", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.json()["request_id"] == "abc123"


class TestExceptionHandlers:
    """Error bodies never leak internals."""

    def test_database_error_is_opaque(self, authorized_client, monkeypatch):
        from backend.app.services import issue_service

        client, _, _ = authorized_client

        def broken(*args, **kwargs):
            raise OperationalError("SELECT secret", {}, Exception("disk I/O error"))

        monkeypatch.setattr(issue_service, "list_issues", broken)

        response = client.get("/api/v1/issues")
        assert response.status_code == 500
        assert response.json() == {"detail": "Database error", "status_code": 500}

    def test_storage_failure_in_guard(self, authorized_client, monkeypatch):
        from core.repositories import IssueRepository

        client, _, _ = authorized_client

        def broken(self, id):
            raise SQLAlchemyError("connection reset")

        monkeypatch.setattr(IssueRepository, "get_by_id", broken)

        response = client.get("/api/v1/issues/1")
        assert response.status_code == 500
        assert response.json()["detail"] == "Database error"

    def test_unhandled_error_is_opaque(self, authorized_client, monkeypatch):
        from fastapi.testclient import TestClient

        from backend.app.services import issue_service

        client, _, _ = authorized_client
        client = TestClient(client.app, raise_server_exceptions=False)

        def broken(*args, **kwargs):
            raise RuntimeError("internal detail")

        monkeypatch.setattr(issue_service, "list_issues", broken)

        response = client.get("/api/v1/issues")
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "status_code": 500}
        assert "internal detail" not in response.text


class TestHealth:
    def test_liveness(self, test_app_client):
        client, _ = test_app_client
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_readiness_without_database(self, test_app_client, monkeypatch):
        from core.db import db

        client, _ = test_app_client
        monkeypatch.setattr(
            db, "health_check", lambda: {"healthy": False, "latency_ms": 0, "error": "down"}
        )

        response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"
