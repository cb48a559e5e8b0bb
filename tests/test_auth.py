from watchmatch.core.config import settings


def test_register_and_login(client):
    resp = client.post(f"{settings.API_STR}/auth/register", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    user = resp.json()
    assert user["username"] == "alice"
    assert user["partnerId"] is None
    assert "password" not in user

    resp = client.post(f"{settings.API_STR}/auth/login", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["id"] == user["id"]

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    me = client.get(f"{settings.API_STR}/auth/user", headers=headers)
    assert me.status_code == 200
    assert me.json()["username"] == "alice"


def test_register_duplicate_username(client, make_user):
    make_user("alice")
    resp = client.post(f"{settings.API_STR}/auth/register", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 400


def test_register_blank_username(client):
    resp = client.post(f"{settings.API_STR}/auth/register", json={"username": "  ", "password": "pw"})
    assert resp.status_code == 400


def test_login_wrong_password(client, make_user):
    make_user("alice", password="right")
    resp = client.post(f"{settings.API_STR}/auth/login", json={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401


def test_current_user_requires_token(client):
    assert client.get(f"{settings.API_STR}/auth/user").status_code == 401
    resp = client.get(f"{settings.API_STR}/auth/user", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_logout(client):
    resp = client.post(f"{settings.API_STR}/auth/logout")
    assert resp.status_code == 200


def test_update_preferences(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user.id)

    resp = client.patch(
        f"{settings.API_STR}/user/preferences",
        headers=headers,
        json={"genres": ["Drama", "Drama", "Comedy"], "favoriteActors": ["Amy Adams"]},
    )
    assert resp.status_code == 200
    assert resp.json()["preferences"] == {
        "genres": ["Drama", "Comedy"],
        "platforms": [],
        "favoriteActors": ["Amy Adams"],
    }

    # Replaces rather than merges
    resp = client.patch(f"{settings.API_STR}/user/preferences", headers=headers, json={"platforms": ["Netflix"]})
    assert resp.json()["preferences"]["genres"] == []
    assert resp.json()["preferences"]["platforms"] == ["Netflix"]


def test_update_preferences_requires_auth(client):
    resp = client.patch(f"{settings.API_STR}/user/preferences", json={"genres": ["Drama"]})
    assert resp.status_code == 401


def test_update_preferences_rejects_malformed_body(client, make_user, auth_headers):
    user = make_user()
    resp = client.patch(
        f"{settings.API_STR}/user/preferences",
        headers=auth_headers(user.id),
        json={"genres": "Drama"},
    )
    assert resp.status_code == 400


def test_health(client, storage):
    resp = client.get(f"{settings.API_STR}/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "storage": storage.backend_name}
