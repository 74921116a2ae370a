"""Request helpers shared by the API tests."""

PASSWORD = "correct-horse-battery"


def register(client, **overrides):
    body = {
        "username": "bob",
        "email": "bob@example.com",
        "fullName": "Bob Builder",
        "password": PASSWORD,
    }
    body.update(overrides)
    return client.post("/api/v1/auth/register", json=body)


def login(client, username="bob", password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"username": username, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def cookie_named(resp, name):
    for header in resp.headers.getlist("Set-Cookie"):
        if header.startswith(f"{name}="):
            return header
    return None
