import pytest

from tests.helpers import bearer, login, register


@pytest.fixture
def token(client):
    register(client)
    return login(client).get_json()["data"]["accessToken"]


def test_me(client, token):
    resp = client.get("/api/v1/users/me", headers=bearer(token))
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["username"] == "bob"
    assert data["fullName"] == "Bob Builder"
    assert set(data) == {"id", "username", "email", "fullName", "avatar", "coverImage", "createdAt"}


def test_update_account_details(client, token):
    resp = client.patch(
        "/api/v1/users/me",
        headers=bearer(token),
        json={"fullName": "Robert Builder", "email": "Robert@Example.com"},
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["fullName"] == "Robert Builder"
    assert data["email"] == "robert@example.com"

    resp = client.get("/api/v1/users/me", headers=bearer(token))
    assert resp.get_json()["data"]["email"] == "robert@example.com"


def test_update_requires_a_field(client, token):
    resp = client.patch("/api/v1/users/me", headers=bearer(token), json={})
    assert resp.status_code == 400


def test_update_rejects_invalid_email(client, token):
    resp = client.patch("/api/v1/users/me", headers=bearer(token), json={"email": "not-an-email"})
    assert resp.status_code == 400
    assert "email" in resp.get_json()["errors"]


def test_update_email_taken(client, token):
    register(client, username="carol", email="carol@example.com")
    resp = client.patch("/api/v1/users/me", headers=bearer(token), json={"email": "carol@example.com"})
    assert resp.status_code == 409


def test_update_requires_authentication(client):
    resp = client.patch("/api/v1/users/me", json={"fullName": "Nobody"})
    assert resp.status_code == 401


def test_update_avatar_and_cover_image(client, token):
    resp = client.patch(
        "/api/v1/users/me",
        headers=bearer(token),
        json={"avatar": "https://cdn.example.com/new.png", "coverImage": "https://cdn.example.com/cover.jpg"},
    )
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["avatar"] == "https://cdn.example.com/new.png"
    assert data["coverImage"] == "https://cdn.example.com/cover.jpg"

    resp = client.get("/api/v1/users/me", headers=bearer(token))
    assert resp.get_json()["data"]["avatar"] == "https://cdn.example.com/new.png"


def test_update_rejects_invalid_avatar_url(client, token):
    resp = client.patch("/api/v1/users/me", headers=bearer(token), json={"avatar": "not a url"})
    assert resp.status_code == 400
    assert "avatar" in resp.get_json()["errors"]
