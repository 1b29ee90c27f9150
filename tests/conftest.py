import os
import uuid

import pytest

# Force the in-memory SQLite engine before the app modules are imported
os.environ.setdefault("PYTEST_RUNNING", "1")
os.environ.pop("DEV_MODE", None)

import estate_core.db.database as db_module
from estate_core.db import models
from estate_core.utils.settings import refresh_settings_cache
from fastapi.testclient import TestClient
from estate_core.api.main import app


def auth_headers(email: str, name: str = None) -> dict:
    """Headers the auth proxy forwards for a signed-in user."""
    return {
        "x-auth-request-email": email,
        "x-auth-request-user": name or email.split("@")[0],
    }


@pytest.fixture(autouse=True)
def _fresh_schema():
    """Recreate every table so each test starts from an empty database."""
    models.Base.metadata.drop_all(bind=db_module.engine)
    models.Base.metadata.create_all(bind=db_module.engine)
    db_module._SCHEMA_INIT_DONE = True
    yield


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DEV_MODE",
        "ALLOW_DEV_MODE",
        "APP_BASE_URL",
        "DEV_MODE_ALLOWED_HOSTS",
        "ACTIVITY_PAGE_DEFAULT",
        "ACTIVITY_PAGE_MAX",
        "INVITE_TTL_DAYS",
        "INVITE_PENDING_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = db_module.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def _make_user(db, label: str) -> models.User:
    user = models.User(email=f"{label}_{uuid.uuid4().hex[:8]}@example.com", display_name=label)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db):
    return _make_user(db, "owner")


@pytest.fixture
def editor(db):
    return _make_user(db, "editor")


@pytest.fixture
def viewer(db):
    return _make_user(db, "viewer")


@pytest.fixture
def stranger(db):
    return _make_user(db, "stranger")


@pytest.fixture
def estate(db, owner, editor, viewer):
    """An estate owned by ``owner`` with one editor and one viewer."""
    row = models.Estate(owner_id=owner.id, label="Estate of J. Doe", decedent_name="J. Doe")
    db.add(row)
    db.flush()
    db.add_all([
        models.EstateCollaborator(estate_id=row.id, user_id=editor.id, role="EDITOR", position=0),
        models.EstateCollaborator(estate_id=row.id, user_id=viewer.id, role="VIEWER", position=1),
    ])
    db.commit()
    db.refresh(row)
    return row
