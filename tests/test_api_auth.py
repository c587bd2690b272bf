# Tests for the auth router: signup, login and the bearer-token guard.


class TestSignup:
    """POST /api/v1/auth/signup"""

    def test_signup_returns_token_and_user(self, client):
        resp = client.post(
            "/api/v1/auth/signup",
            json={"email": "sam@example.com", "password": "secret123", "name": "Sam"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["email"] == "sam@example.com"
        assert data["user"]["notifications_enabled"] is True
        assert "hashed_password" not in data["user"]

    def test_duplicate_email_rejected(self, client, make_user):
        make_user(email="sam@example.com")
        resp = client.post("/api/v1/auth/signup", json={"email": "sam@example.com", "password": "another1"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] is True
        assert "already exists" in body["message"]

    def test_short_password_rejected(self, client):
        resp = client.post("/api/v1/auth/signup", json={"email": "sam@example.com", "password": "123"})
        assert resp.status_code == 422

    def test_invalid_email_rejected(self, client):
        resp = client.post("/api/v1/auth/signup", json={"email": "not-an-email", "password": "secret123"})
        assert resp.status_code == 422


class TestLogin:
    """POST /api/v1/auth/login"""

    def test_login_success(self, client, make_user):
        make_user(email="sam@example.com", password="secret123")
        resp = client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "secret123"})
        assert resp.status_code == 200
        token = resp.json()["access_token"]

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "sam@example.com"

    def test_wrong_password(self, client, make_user):
        make_user(email="sam@example.com", password="secret123")
        resp = client.post("/api/v1/auth/login", json={"email": "sam@example.com", "password": "wrong-one"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Incorrect email or password"

    def test_unknown_email(self, client):
        resp = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
        assert resp.status_code == 400


class TestAuthGuard:
    """Every reminders route requires a valid bearer token."""

    def test_me_with_token(self, client, make_user):
        account = make_user()
        resp = client.get("/api/v1/auth/me", headers=account["headers"])
        assert resp.status_code == 200
        assert resp.json()["id"] == account["id"]

    def test_missing_token_is_401(self, client):
        resp = client.get("/api/v1/reminders")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Could not validate credentials"
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_garbage_token_is_401(self, client):
        resp = client.get("/api/v1/reminders", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_token_signed_with_other_key_is_401(self, client, make_user):
        from jose import jwt

        account = make_user()
        forged = jwt.encode({"sub": str(account["id"])}, "some-other-secret", algorithm="HS256")
        resp = client.get("/api/v1/reminders", headers={"Authorization": f"Bearer {forged}"})
        assert resp.status_code == 401

    def test_token_for_unknown_user_is_401(self, client):
        from reminder_app.core.security import create_access_token

        token = create_access_token(9999)
        resp = client.get("/api/v1/reminders", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
