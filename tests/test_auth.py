from ecofinds.repositories.user_repo import UserRepository

PASSWORD = "Passw0rd!"


def test_signup_returns_token_and_user(client):
    resp = client.post(
        "/api/auth/signup",
        json={"displayName": "  Alice  ", "email": "Alice@Example.com", "password": PASSWORD},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["token"]
    assert body["data"]["user"]["email"] == "alice@example.com"
    assert body["data"]["user"]["displayName"] == "Alice"


def test_signup_duplicate_email(client, register):
    register(email="bob@example.com")
    resp = client.post(
        "/api/auth/signup",
        json={"displayName": "Bob", "email": "BOB@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Email is already registered"}


def test_signup_weak_password(client):
    resp = client.post(
        "/api/auth/signup",
        json={"displayName": "Carol", "email": "carol@example.com", "password": "password"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert any(err["field"] == "password" for err in body["errors"])


def test_signup_short_display_name(client):
    resp = client.post(
        "/api/auth/signup",
        json={"displayName": "D", "email": "d@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    assert any(err["field"] == "displayName" for err in resp.json()["errors"])


def test_login(client, register):
    register(email="erin@example.com")
    resp = client.post("/api/auth/login", json={"email": "erin@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["email"] == "erin@example.com"


def test_login_wrong_password(client, register):
    register(email="frank@example.com")
    resp = client.post("/api/auth/login", json={"email": "frank@example.com", "password": "Wr0ng!pass"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client):
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_me_requires_token(client):
    assert client.get("/api/users/me").status_code == 401


def test_me_rejects_bad_token(client):
    resp = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_me(client, register):
    headers, user_id = register(email="gina@example.com", display_name="Gina")
    resp = client.get("/api/users/me", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == user_id
    assert data["displayName"] == "Gina"
    assert data["imageUrl"] is None


def test_signup_race_on_email_is_rejected(client, register, monkeypatch):
    register(email="bob@example.com")
    # Another request inserted the email after the lookup ran.
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, session, email: None)

    resp = client.post(
        "/api/auth/signup",
        json={"displayName": "Bob", "email": "bob@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email is already registered"
