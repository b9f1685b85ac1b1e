"""
Pytest fixtures for the Bearded issues service tests.

Every test gets a fresh in-memory SQLite database with foreign keys on.
Seeding helpers create the users, projects and targets that other services
would normally own.
"""

import os

# Settings are cached on first use, so the environment is fixed before any
# application module is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.db import Base, enable_sqlite_foreign_keys  # noqa: E402
from core.models import Project, ProjectMember, Target, TargetIssue, User  # noqa: E402


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh test database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    yield db_url, TestingSessionLocal, engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Seeding
# =============================================================================


class Seeder:
    """Create rows directly, committing each one."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _add(self, instance):
        session = self.session_factory()
        try:
            session.add(instance)
            session.commit()
            return instance
        finally:
            session.close()

    def user(self, username: str = "tester", is_admin: bool = False) -> User:
        return self._add(User(username=username, email=f"{username}@example.com", is_admin=is_admin))

    def project(self, owner: User, name: str = "Acme") -> Project:
        return self._add(Project(name=name, owner_id=owner.id))

    def member(self, project: Project, user: User) -> ProjectMember:
        return self._add(ProjectMember(project_id=project.id, user_id=user.id))

    def target(self, project: Project, name: str = "acme.example") -> Target:
        return self._add(Target(project_id=project.id, name=name, url=f"https://{name}"))

    def issue(self, target: Target, reporter: User, **fields) -> TargetIssue:
        fields.setdefault("summary", "SQL injection in login form")
        fields.setdefault("severity", "high")
        issue = TargetIssue(project_id=target.project_id, target_id=target.id, **fields)
        issue.add_user_report_activity(reporter.id)
        return self._add(issue)


@pytest.fixture
def seed(test_db) -> Seeder:
    _, TestingSessionLocal, _ = test_db
    return Seeder(TestingSessionLocal)
