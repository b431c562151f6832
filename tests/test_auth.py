"""Tests for authentication endpoints and flows."""

import io

from fastapi.testclient import TestClient

from app.store.memory import MemoryStore


class TestSignup:
    """Tests for user signup."""

    def test_signup_success(self, client: TestClient):
        """Signup returns a token and the public user view."""
        response = client.post(
            "/api/auth/signup",
            json={"email": "new@example.com", "password": "password123", "city": "Oslo", "country": "Norway"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["city"] == "Oslo"
        assert data["user"]["country"] == "Norway"
        assert data["user"]["profilePic"] is None
        assert "password" not in data["user"]
        assert "passwordHash" not in data["user"]

    def test_signup_defaults_location(self, client: TestClient):
        """City and country default to Unknown."""
        response = client.post("/api/auth/signup", json={"email": "anon@example.com", "password": "pw"})
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["city"] == "Unknown"
        assert user["country"] == "Unknown"

    def test_signup_missing_password(self, client: TestClient):
        """Missing password is rejected."""
        response = client.post("/api/auth/signup", json={"email": "x@example.com"})
        assert response.status_code == 400
        assert response.json()["error"] == "Email & password required"

    def test_signup_missing_email(self, client: TestClient):
        """Empty email is rejected."""
        response = client.post("/api/auth/signup", json={"email": "", "password": "pw"})
        assert response.status_code == 400
        assert "required" in response.json()["error"]

    def test_signup_duplicate_email(self, client: TestClient, test_user: dict):
        """Reject duplicate email signup."""
        response = client.post(
            "/api/auth/signup",
            json={"email": "alice@example.com", "password": "other"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"

    def test_password_is_hashed(self, client: TestClient, store: MemoryStore):
        """The stored credential is not the plaintext password."""
        client.post("/api/auth/signup", json={"email": "hash@example.com", "password": "secret"})
        user = store.users.get_by_email("hash@example.com")
        assert user.password_hash != "secret"
        assert user.password_hash.startswith("$2")

    def test_long_password(self, client: TestClient):
        """Passwords past bcrypt's 72 byte input limit still sign up and log in."""
        password = "p" * 79 + "!"
        response = client.post("/api/auth/signup", json={"email": "long@example.com", "password": password})
        assert response.status_code == 200

        login = client.post("/api/auth/login", json={"email": "long@example.com", "password": password})
        assert login.status_code == 200
        assert login.json()["user"]["email"] == "long@example.com"

        # Differs only after byte 72.
        wrong = client.post("/api/auth/login", json={"email": "long@example.com", "password": "p" * 80})
        assert wrong.status_code == 400
        assert wrong.json()["error"] == "Invalid credentials"


class TestLogin:
    """Tests for user login."""

    def test_login_success(self, client: TestClient, test_user: dict):
        """Login with valid credentials returns a working token."""
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == test_user["user_id"]
        assert "password" not in data["user"]

        feed = client.get("/api/voices", headers={"Authorization": f"Bearer {data['token']}"})
        assert feed.status_code == 200

    def test_login_wrong_password(self, client: TestClient, test_user: dict):
        """Reject login with wrong password."""
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid credentials"

    def test_login_unknown_email(self, client: TestClient):
        """Reject login with unknown email."""
        response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "pw"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid credentials"

    def test_login_missing_fields(self, client: TestClient, test_user: dict):
        """An empty body is treated as invalid credentials."""
        response = client.post("/api/auth/login", json={})
        assert response.status_code == 400


class TestTokens:
    """Tests for bearer token enforcement."""

    def test_missing_token(self, client: TestClient):
        """Protected routes need a token."""
        response = client.get("/api/voices")
        assert response.status_code == 401
        assert response.json()["error"] == "No token"

    def test_invalid_token(self, client: TestClient):
        """Garbage tokens are rejected."""
        response = client.get("/api/voices", headers={"Authorization": "Bearer invalid.token.here"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"

    def test_wrong_scheme(self, client: TestClient, test_user: dict):
        """Only the Bearer scheme is accepted."""
        response = client.get("/api/voices", headers={"Authorization": f"Token {test_user['token']}"})
        assert response.status_code == 401

    def test_verify_valid_token(self, client: TestClient, test_user: dict):
        """Verify a valid token returns its user id."""
        response = client.get(f"/api/auth/verify?token={test_user['token']}")
        assert response.status_code == 200
        assert response.json() == {"valid": True, "userId": test_user["user_id"]}

    def test_verify_invalid_token(self, client: TestClient):
        """Reject an invalid token."""
        response = client.get("/api/auth/verify?token=invalid.token.here")
        assert response.status_code == 401


class TestProfile:
    """Tests for profile updates."""

    def test_update_both_fields(self, client: TestClient, test_user: dict):
        response = client.put(
            "/api/auth/update",
            json={"city": "Berlin", "country": "Germany"},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["city"] == "Berlin"
        assert user["country"] == "Germany"
        assert "password" not in user

    def test_update_only_city(self, client: TestClient, test_user: dict):
        """Omitted fields keep their previous value."""
        response = client.put("/api/auth/update", json={"city": "Lyon"}, headers=test_user["headers"])
        user = response.json()["user"]
        assert user["city"] == "Lyon"
        assert user["country"] == "France"

    def test_update_unknown_user(self, client: TestClient):
        """A valid token for a user the store does not know yields 404."""
        from app.services.jwt import get_jwt_service

        token = get_jwt_service().create_token("no-such-user")
        response = client.put(
            "/api/auth/update",
            json={"city": "X"},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    def test_update_requires_auth(self, client: TestClient):
        response = client.put("/api/auth/update", json={"city": "X"})
        assert response.status_code == 401


class TestProfilePicture:
    """Tests for profile picture upload."""

    def test_upload_profile_pic(self, client: TestClient, test_user: dict, store: MemoryStore, upload_dir):
        response = client.post(
            "/api/user/profile-pic",
            files={"profilePic": ("me.png", io.BytesIO(b"\x89PNG" + b"\x00" * 64), "image/png")},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        filename = response.json()["profilePic"]
        assert filename.endswith("-me.png")
        assert (upload_dir / filename).exists()
        assert store.users.get_by_id(test_user["user_id"]).profile_pic == filename

    def test_upload_profile_pic_auth_alias(self, client: TestClient, test_user: dict):
        """The auth-prefixed path works too."""
        response = client.post(
            "/api/auth/profile-pic",
            files={"profilePic": ("me.jpg", io.BytesIO(b"\xff\xd8" + b"\x00" * 64), "image/jpeg")},
            headers=test_user["headers"],
        )
        assert response.status_code == 200

    def test_profile_pic_shows_in_login(self, client: TestClient, test_user: dict):
        upload = client.post(
            "/api/user/profile-pic",
            files={"profilePic": ("me.png", io.BytesIO(b"\x00" * 16), "image/png")},
            headers=test_user["headers"],
        )
        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
        assert response.json()["user"]["profilePic"] == upload.json()["profilePic"]

    def test_profile_pic_missing_file(self, client: TestClient, test_user: dict):
        response = client.post("/api/user/profile-pic", headers=test_user["headers"])
        assert response.status_code == 400
        assert "No file provided" in response.json()["error"]

    def test_profile_pic_rejects_audio(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/user/profile-pic",
            files={"profilePic": ("clip.webm", io.BytesIO(b"\x00" * 16), "audio/webm")},
            headers=test_user["headers"],
        )
        assert response.status_code == 400
        assert "image" in response.json()["error"]


class TestPages:
    """Tests for the health check and the web client page."""

    def test_health_check(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "app": "voiceapp", "version": "0.1.0"}

    def test_index_serves_client(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert 'id="app"' in response.text
        assert "js/app.js" in response.text
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_unknown_route_uses_error_shape(self, client: TestClient):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert "error" in response.json()
