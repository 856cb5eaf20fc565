from fastapi.testclient import TestClient

from authgate.adapters.outbound.security.rate_limiter import InMemoryRateLimiter
from authgate.domain.models.user_domain_model import User
from authgate.main import create_app
from tests.conftest import InMemoryUserRepository, auth_headers, login, make_settings


class TestLoginEndpoint:
    def test_login_success(self, client):
        """Should return a Bearer token pair and the user profile."""
        response = client.post("/api/auth/login", json={"username": "alice", "password": "secret"})

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "Bearer"
        assert body["expires_in"] == 3600
        assert body["access_token"]
        assert body["refresh_token"]
        assert body["user"]["username"] == "alice"
        assert body["user"]["authorities"] == ["user:view", "ROLE_USER"]
        assert "password" not in body["user"]

    def test_login_bad_password(self, client):
        response = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "invalid_grant"
        assert body["error_description"] == "Invalid username or password"
        assert body["path"] == "/api/auth/login"

    def test_login_unknown_user_same_body(self, client):
        """Should answer unknown users exactly like wrong passwords."""
        unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "secret"})
        wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    def test_login_disabled_user(self, client):
        response = client.post("/api/auth/login", json={"username": "bob", "password": "secret"})

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_grant"
        assert response.json()["error_description"] == "User account is disabled"

    def test_login_validation_error(self, client):
        """Should map body validation failures to 400 invalid_request."""
        response = client.post("/api/auth/login", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_request"
        assert "username" in body["error_description"]
        assert "password" in body["error_description"]
        assert ", " in body["error_description"]

    def test_login_blank_username(self, client):
        response = client.post("/api/auth/login", json={"username": "", "password": "secret"})

        assert response.status_code == 400
        assert response.json()["error_description"].startswith("username:")


class TestRefreshEndpoint:
    def test_refresh_rotates_pair(self, client, alice_tokens):
        """Should issue a new pair once and reject the used refresh token."""
        refresh = alice_tokens["refresh_token"]

        first = client.post("/api/auth/refresh", json={"refresh_token": refresh})
        assert first.status_code == 200
        new_pair = first.json()
        assert new_pair["refresh_token"] != refresh

        second = client.post("/api/auth/refresh", json={"refresh_token": refresh})
        assert second.status_code == 401
        assert second.json()["error"] == "invalid_grant"

        me = client.get("/api/auth/me", headers=auth_headers(new_pair["access_token"]))
        assert me.status_code == 200

    def test_refresh_with_access_token(self, client, alice_tokens):
        response = client.post("/api/auth/refresh", json={"refresh_token": alice_tokens["access_token"]})

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_grant"

    def test_refresh_missing_field(self, client):
        response = client.post("/api/auth/refresh", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"


class TestLogoutAndMe:
    def test_full_session(self, client):
        """Should serve /me after login and refuse it after logout."""
        tokens = login(client)
        headers = auth_headers(tokens["access_token"])

        me = client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["username"] == "alice"
        assert me.json()["email"] == "alice@example.com"

        logout = client.post("/api/auth/logout", headers=headers)
        assert logout.status_code == 200
        assert logout.json() == {"message": "Logout successful"}

        after = client.get("/api/auth/me", headers=headers)
        assert after.status_code == 403
        assert after.json()["error"] == "invalid_token"
        assert after.json()["error_description"] == "Token has been invalidated, please re-login"

    def test_logout_leaves_other_sessions(self, client):
        first = login(client)
        second = login(client)

        client.post("/api/auth/logout", headers=auth_headers(first["access_token"]))

        assert client.get("/api/auth/me", headers=auth_headers(second["access_token"])).status_code == 200

    def test_logout_without_token(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_request"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_me_carries_token_authorities(self, client):
        tokens = login(client, "carol")
        response = client.get("/api/auth/me", headers=auth_headers(tokens["access_token"]))

        assert response.status_code == 200
        assert response.json()["tenant_id"] == 42
        assert "ROLE_ADMIN" in response.json()["authorities"]


class TestOpenAPI:
    def test_no_422_responses(self, client):
        schema = client.get("/openapi.json").json()

        for path in schema["paths"].values():
            for operation in path.values():
                assert "422" not in operation["responses"]
        assert "/api/auth/login" in schema["paths"]


class TestStoredProfileData:
    def test_reserved_email_domain(self, password_hasher):
        """Should echo the stored address instead of failing on its domain."""
        ops = User(id=10, username="ops", password=password_hasher.hash("secret"), email="ops@corp.local")
        app = create_app(
            make_settings(),
            user_repository=InMemoryUserRepository([ops]),
            password_hasher=password_hasher,
            rate_limiter=InMemoryRateLimiter(window_seconds=60),
        )
        with TestClient(app) as client:
            tokens = login(client, "ops")
            me = client.get("/api/auth/me", headers=auth_headers(tokens["access_token"]))

        assert tokens["user"]["email"] == "ops@corp.local"
        assert me.status_code == 200
        assert me.json()["email"] == "ops@corp.local"
