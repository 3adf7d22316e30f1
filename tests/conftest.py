"""
conftest.py
-----------
Shared pytest fixtures for Folio tests.

Provides fixtures for:
- Settings and temporary upload directories
- Database setup and teardown
- Entity managers bound to a test session
- The API application, a test client and bearer-token headers
"""
import pytest

from fastapi.testclient import TestClient


ADMIN_EMAIL = "admin@folio.test"
ADMIN_PASSWORD = "Admin123!"
EDITOR_EMAIL = "editor@folio.test"
EDITOR_PASSWORD = "Editor123!"


# ----- Path Fixtures -----

@pytest.fixture
def upload_dir(tmp_path):
    """Directory uploaded media is written to."""
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(upload_dir):
    """Settings with a fixed secret and site URL."""
    from folio.core.config import Settings

    return Settings(
        site_name="Test Folio",
        site_url="https://folio.test",
        site_author="Tester",
        twitter_handle="tester",
        jwt_secret="test-secret",
        token_expire_minutes=60,
        cors_origins=["http://localhost:5173"],
        upload_dir=upload_dir,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


# ----- Database Fixtures -----

@pytest.fixture
def test_db_path(tmp_path):
    """Create temporary test database path."""
    return tmp_path / "test.db"


@pytest.fixture
def test_db(test_db_path, test_settings):
    """
    Create test database instance with schema.

    Returns a FolioDB instance with every table created.
    Database is torn down after the test.
    """
    from folio.database.manager import FolioDB
    from folio.database.models import Base

    db = FolioDB(
        db_path=test_db_path,
        upload_dir=test_settings.upload_dir,
        settings=test_settings,
    )
    Base.metadata.create_all(db.engine)

    yield db

    db.dispose()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


# ----- Manager Fixtures -----

@pytest.fixture
def project_manager(db_session):
    """Create ProjectManager instance for testing."""
    from folio.database.managers import ProjectManager
    return ProjectManager(db_session)


@pytest.fixture
def blog_post_manager(db_session):
    """Create BlogPostManager instance for testing."""
    from folio.database.managers import BlogPostManager
    return BlogPostManager(db_session)


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from folio.database.managers import TagManager
    return TagManager(db_session)


@pytest.fixture
def skill_manager(db_session):
    """Create SkillManager instance for testing."""
    from folio.database.managers import SkillManager
    return SkillManager(db_session)


@pytest.fixture
def media_manager(db_session, upload_dir):
    """Create MediaManager writing into the temporary upload directory."""
    from folio.database.managers import MediaManager
    return MediaManager(db_session, upload_dir=upload_dir)


@pytest.fixture
def user_manager(db_session):
    """Create UserManager instance for testing."""
    from folio.database.managers import UserManager
    return UserManager(db_session)


@pytest.fixture
def stats_manager(db_session):
    """Create ContentStatsManager instance for testing."""
    from folio.database.managers import ContentStatsManager
    return ContentStatsManager(db_session)


# ----- API Fixtures -----

@pytest.fixture
def app(test_db, test_settings):
    """API application bound to the test database."""
    from folio.api.app import create_app
    return create_app(test_db, test_settings)


@pytest.fixture
def client(app):
    """HTTP client for the API application."""
    with TestClient(app) as test_client:
        yield test_client


def _create_user(db, email, password, name, role):
    with db.session_scope():
        return db.users.create(
            {"email": email, "password": password, "name": name, "role": role}
        )


@pytest.fixture
def admin_user(test_db):
    """Committed admin account."""
    return _create_user(test_db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin", "admin")


@pytest.fixture
def editor_user(test_db):
    """Committed editor account."""
    return _create_user(test_db, EDITOR_EMAIL, EDITOR_PASSWORD, "Editor", "editor")


@pytest.fixture
def admin_headers(admin_user, test_settings):
    """Authorization header for the admin account."""
    from folio.api.auth import create_access_token
    return {"Authorization": f"Bearer {create_access_token(admin_user, test_settings)}"}


@pytest.fixture
def editor_headers(editor_user, test_settings):
    """Authorization header for the editor account."""
    from folio.api.auth import create_access_token
    return {"Authorization": f"Bearer {create_access_token(editor_user, test_settings)}"}
