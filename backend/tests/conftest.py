import os
import tempfile

# Settings are read at import time by the app (upload mount), so configure first
os.environ["JWT_SECRET"] = "test-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="resume-uploads-")
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""

import pytest

from resume_builder.config import get_settings

get_settings.cache_clear()

from tests.fakes import FakeSupabase  # noqa: E402


@pytest.fixture
def fake_db(monkeypatch):
    """Route every database call to an in-memory Supabase stand-in."""
    from resume_builder import database
    fake = FakeSupabase()
    monkeypatch.setattr(database, "_get_client", lambda: fake)
    return fake


@pytest.fixture
def upload_path():
    return get_settings().upload_dir


@pytest.fixture
def api(fake_db):
    from fastapi.testclient import TestClient
    from resume_builder.main import app
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(api):
    resp = api.post("/api/auth/register", json={
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "correct-horse",
    })
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
