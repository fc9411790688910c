"""Shared fixtures: an app client backed by throwaway data files."""

import pytest
from fastapi.testclient import TestClient

import config
from auth import TokenStore
from engine.store import MonsterStore

ADMIN_HEADERS = {"X-Admin-Secret": "change-me-in-production"}


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client whose token and monster stores live under tmp_path."""
    monkeypatch.setattr(config, "ADMIN_SECRET", "change-me-in-production")
    monkeypatch.setattr(config, "SECRET_FILE", str(tmp_path / "admin_secret.txt"))

    from main import app
    monkeypatch.setattr(app.state, "tokens", TokenStore(str(tmp_path / "tokens.json")))
    monkeypatch.setattr(app.state, "monsters", MonsterStore(str(tmp_path / "monsters.json")))
    return TestClient(app)


def register(client, owner_id: str = "alice", name: str = "Alice") -> dict:
    """Register a user and return Authorization headers for them."""
    resp = client.post(
        "/admin/register",
        json={"owner_id": owner_id, "name": name},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['api_key']}"}
