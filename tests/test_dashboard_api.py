import pytest
from fastapi.testclient import TestClient

from config import AppConfig
from dashboard.app import create_app
from dashboard.config import DashboardSettings
from database.manager import LocalStore
from database.storage import MemoryStorage
from models.auth import AuthError, AuthEvent, AuthSession, AuthUser
from services.auth_service import DEV_USER, AuthProvider, AuthService, OfflineAuthProvider


class CodeProvider(AuthProvider):
    """Принимает код 123456 для любого email"""

    async def get_session(self):
        return None

    async def sign_in_with_otp(self, email, redirect_to=None):
        return None

    async def verify_otp(self, email, token):
        if token != "123456":
            raise AuthError("Token has expired or is invalid", status=403)
        session = AuthSession(access_token="provider-token", user=AuthUser(id=email, email=email))
        self._emit(AuthEvent.SIGNED_IN, session)
        return session

    async def sign_out(self):
        self._emit(AuthEvent.SIGNED_OUT, None)


@pytest.fixture()
def app_config(monkeypatch, tmp_path):
    monkeypatch.setenv("DEV_LOGIN_ENABLED", "true")
    monkeypatch.setenv("AUTO_BACKUP", "false")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    return AppConfig()


@pytest.fixture()
def store():
    return LocalStore(MemoryStorage())


def make_app(app_config, store, provider=None):
    return create_app(
        store=store,
        auth_service=AuthService(provider or OfflineAuthProvider()),
        settings=DashboardSettings(),
        app_config=app_config,
    )


@pytest.fixture()
def client(app_config, store):
    with TestClient(make_app(app_config, store)) as test_client:
        yield test_client


def dev_login(client):
    response = client.post("/api/auth/dev-login")
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def auth_headers(client):
    return dev_login(client)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["services"]["store"]["habits"] == 0
    assert body["services"]["auth"]["active_sessions"] == 0
    assert body["services"]["backup_scheduler"]["status"] == "disabled"


def test_routes_require_login(client):
    assert client.get("/api/habits/").status_code == 401
    assert client.get("/api/entries/").status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_unknown_token_is_rejected(client):
    headers = {"Authorization": "Bearer not-a-session"}

    assert client.get("/api/habits/", headers=headers).status_code == 401


def test_dev_login_and_logout(client):
    response = client.post("/api/auth/dev-login")
    body = response.json()
    headers = {"Authorization": f"Bearer {body['access_token']}"}

    assert body["id"] == DEV_USER.id
    assert body["token_type"] == "bearer"
    assert client.get("/api/auth/me", headers=headers).json()["email"] == DEV_USER.email

    assert client.post("/api/auth/logout", headers=headers).json() == {"ok": True, "error": None}
    assert client.get("/api/habits/", headers=headers).status_code == 401


def test_login_is_per_client(client):
    owner = dev_login(client)
    client.put("/api/habits/h1", json={"name": "Private"}, headers=owner)

    # Запрос без токена не видит чужие данные даже после чужого входа
    assert client.get("/api/habits/").status_code == 401

    # Выход другого клиента не закрывает сессию владельца
    other = dev_login(client)
    client.post("/api/auth/logout", headers=other)
    client.post("/api/auth/logout")

    response = client.get("/api/habits/", headers=owner)
    assert response.status_code == 200
    assert [h["name"] for h in response.json()] == ["Private"]
    assert client.get("/api/habits/", headers=other).status_code == 401


def test_verified_users_see_only_their_habits(app_config, store):
    with TestClient(make_app(app_config, store, provider=CodeProvider())) as client:
        tokens = {}
        for email in ("alice@example.com", "bob@example.com"):
            response = client.post("/api/auth/verify", json={"email": email, "token": "123456"})
            assert response.status_code == 200
            assert response.json()["id"] == email
            tokens[email] = {"Authorization": f"Bearer {response.json()['access_token']}"}

        client.put("/api/habits/a1", json={"name": "Alice"}, headers=tokens["alice@example.com"])
        client.put("/api/habits/b1", json={"name": "Bob"}, headers=tokens["bob@example.com"])

        alice = client.get("/api/habits/", headers=tokens["alice@example.com"]).json()
        bob = client.get("/api/habits/", headers=tokens["bob@example.com"]).json()

    assert [h["id"] for h in alice] == ["a1"]
    assert [h["id"] for h in bob] == ["b1"]


def test_verify_with_wrong_code(app_config, store):
    with TestClient(make_app(app_config, store, provider=CodeProvider())) as client:
        response = client.post("/api/auth/verify",
                               json={"email": "alice@example.com", "token": "000000"})

    assert response.status_code == 401
    assert "expired" in response.json()["detail"]


def test_dev_login_disabled(monkeypatch, store):
    monkeypatch.setenv("DEV_LOGIN_ENABLED", "false")
    monkeypatch.setenv("AUTO_BACKUP", "false")

    with TestClient(make_app(AppConfig(), store)) as client:
        assert client.post("/api/auth/dev-login").status_code == 404


def test_otp_error_returned_in_body(client):
    response = client.post("/api/auth/otp", json={"email": "alice@example.com"})

    assert response.status_code == 200
    assert response.json()["ok"] is False
    assert "not configured" in response.json()["error"]


def test_otp_rejects_bad_email(client):
    assert client.post("/api/auth/otp", json={"email": "nope"}).status_code == 422


def test_habit_crud(client, auth_headers, store):
    response = client.put("/api/habits/h1", json={"name": "Water", "icon": "💧"},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Water"
    assert response.json()["user_id"] == DEV_USER.id

    response = client.put("/api/habits/h1", json={"color": "#10b981"}, headers=auth_headers)
    assert response.json()["name"] == "Water"
    assert response.json()["color"] == "#10b981"

    assert client.get("/api/habits/h1", headers=auth_headers).json()["icon"] == "💧"
    assert client.get("/api/habits/missing", headers=auth_headers).status_code == 404
    assert store.get_habit(DEV_USER.id, "h1").color == "#10b981"

    assert client.delete("/api/habits/h1", headers=auth_headers).status_code == 204
    assert client.get("/api/habits/", headers=auth_headers).json() == []


def test_invalid_color_rejected(client, auth_headers):
    response = client.put("/api/habits/h1", json={"color": "red"}, headers=auth_headers)

    assert response.status_code == 422


def test_reorder(client, auth_headers):
    for habit_id in ("A", "B", "C"):
        client.put(f"/api/habits/{habit_id}", json={}, headers=auth_headers)

    response = client.post("/api/habits/reorder", json={"habit_ids": ["C", "A", "B", "Z"]},
                           headers=auth_headers)

    assert response.status_code == 200
    assert [h["id"] for h in response.json()] == ["C", "A", "B"]
    assert [h["order_index"] for h in response.json()] == [0, 1, 2]


def test_entries_flow(client, auth_headers):
    client.put("/api/habits/h1", json={"name": "Fasting", "is_two_step": True},
               headers=auth_headers)

    response = client.put("/api/entries/h1/2024-01-01",
                          json={"value": 1, "fasting_hours": 16, "note": "ok"},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["id"] == f"{DEV_USER.id}:h1:2024-01-01"

    entry = client.get("/api/entries/h1/2024-01-01", headers=auth_headers).json()
    assert entry["fasting_hours"] == 16
    assert entry["note"] == "ok"

    client.put("/api/entries/h1/2024-01-02", json={"value": 0}, headers=auth_headers)
    by_habit = client.get("/api/entries/", params={"habit_id": "h1"}, headers=auth_headers)
    by_date = client.get("/api/entries/", params={"date": "2024-01-02"}, headers=auth_headers)
    assert len(by_habit.json()) == 2
    assert len(by_date.json()) == 1

    assert client.delete("/api/entries/h1/2024-01-02", headers=auth_headers).status_code == 204
    assert client.get("/api/entries/h1/2024-01-02", headers=auth_headers).status_code == 404

    client.delete("/api/habits/h1", headers=auth_headers)
    assert client.get("/api/entries/", headers=auth_headers).json() == []


def test_today_entries(client, auth_headers):
    from utils.datetime_utils import today_str

    today = today_str()
    client.put(f"/api/entries/h1/{today}", json={"value": 1}, headers=auth_headers)
    client.put("/api/entries/h1/2000-01-01", json={"value": 1}, headers=auth_headers)

    response = client.get("/api/entries/today", headers=auth_headers)

    assert [e["date"] for e in response.json()] == [today]
