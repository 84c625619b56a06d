import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Use in-memory SQLite for tests by default, can be overridden via TEST_DATABASE_URL
TEST_DB_URL = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")

# Ensure the app uses SQLite during imports (elkpeak.main creates tables in non-prod).
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DATABASE_URL", TEST_DB_URL)
os.environ["REDIS_URL"] = ""
os.environ["ALLOWED_ORIGINS"] = ""
os.environ.pop("API_KEY", None)
os.environ.pop("RESEND_API_KEY", None)

from elkpeak.main import create_app
from elkpeak.core.config import get_settings
from elkpeak.core.rate_limit import reset_counters
from elkpeak.db.base import Base
from elkpeak.db.session import get_db_session
from elkpeak.models.credential import AdminCredential
from elkpeak.services.credentials import hash_password_bcrypt

ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def _fresh_state():
    get_settings.cache_clear()
    reset_counters()
    yield
    get_settings.cache_clear()
    reset_counters()


@pytest.fixture
def set_env(monkeypatch):
    """Set environment variables and drop the cached settings so they apply."""

    def _set(**values):
        for key, value in values.items():
            monkeypatch.setenv(key, str(value))
        get_settings.cache_clear()

    return _set


@pytest.fixture(scope="function")
def engine():
    # Important: in-memory SQLite needs StaticPool to keep the same DB across connections.
    kwargs = {"connect_args": {"check_same_thread": False}}
    if TEST_DB_URL.endswith(":memory:"):
        kwargs["poolclass"] = StaticPool
    eng = create_engine(TEST_DB_URL, **kwargs)
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)


@pytest.fixture(scope="function")
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    app = create_app()

    # Override the DB session dependency to use the test database
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db_session] = override_get_db
    return TestClient(app)


@pytest.fixture
def admin(db_session):
    """An admin credential row; low bcrypt cost keeps the suite fast."""
    row = AdminCredential(password_hash=hash_password_bcrypt(ADMIN_PASSWORD, rounds=4), is_admin=True, name="Owner")
    db_session.add(row)
    db_session.commit()
    return row


@pytest.fixture
def admin_headers(admin):
    return {"x-admin-password": ADMIN_PASSWORD}
