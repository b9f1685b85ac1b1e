import os
import sys
from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from backend.app.auth.dependencies import get_current_user  # noqa: E402
from backend.app.main import create_app  # noqa: E402
from core.db import get_db  # noqa: E402
from core.models import Project, Target, User  # noqa: E402


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    db_url, TestingSessionLocal, engine = test_db

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        db = TestingSessionLocal()
        try:
            yield db
            db.commit()  # Auto-commit on success like production
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    # Not entered as a context manager: startup would initialize the
    # global database, while tests run against the fixture engine.
    client = TestClient(app)
    yield client, TestingSessionLocal


@pytest.fixture
def authorized_client(
    test_app_client, seed
) -> Iterator[tuple[TestClient, Callable[[], User], sessionmaker]]:
    """Client authenticated as ``tester``, the owner of project ``Acme``."""
    client, TestingSessionLocal = test_app_client
    user = seed.user("tester")

    def override_current_user() -> User:
        session_inner = TestingSessionLocal()
        try:
            return session_inner.query(User).filter(User.id == user.id).one()
        finally:
            session_inner.close()

    client.app.dependency_overrides[get_current_user] = override_current_user

    yield client, override_current_user, TestingSessionLocal

    client.app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def owned_target(authorized_client, seed) -> Target:
    """A target in a project owned by the authorized user."""
    _, current_user, _ = authorized_client
    project: Project = seed.project(current_user())
    return seed.target(project)


@pytest.fixture
def foreign_target(seed) -> Target:
    """A target in a project the authorized user has no access to."""
    outsider = seed.user("outsider")
    return seed.target(seed.project(outsider, name="Other"), name="other.example")
