"""Tests for token handling, signup and login"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.core.auth import _decode_id_token, _token_to_principal
from storefront.core.errors import Unauthorized
from storefront.main import create_app
from storefront.routers import auth as auth_router


class _FakeUserRecord:
    def __init__(self, uid):
        self.uid = uid


class TestTokens:

    def test_mock_token_with_email_uid(self):
        principal = _token_to_principal(_decode_id_token("mock_jwt_token_alice@example.com", allow_mock=True))

        assert principal.uid == "alice@example.com"
        assert principal.email == "alice@example.com"
        assert principal.role == "user"

    def test_mock_token_without_email(self):
        principal = _token_to_principal(_decode_id_token("mock_jwt_token_user-7", allow_mock=True))

        assert principal.uid == "user-7"
        assert principal.email is None

    def test_anonymous_mock_token_is_guest(self):
        principal = _token_to_principal(_decode_id_token("mock_jwt_token_anonymous-1", allow_mock=True))

        assert principal.role == "guest"

    def test_empty_mock_uid_rejected(self):
        with pytest.raises(Unauthorized):
            _decode_id_token("mock_jwt_token_", allow_mock=True)

    def test_mock_tokens_disabled(self):
        with pytest.raises(Unauthorized):
            _decode_id_token("mock_jwt_token_alice@example.com", allow_mock=False)

    def test_mock_tokens_disabled_over_http(self, settings, cart_repo, txn_repo, mailer, auth_headers):
        strict = settings.model_copy(update={"allow_mock_tokens": False})
        app = create_app(settings=strict, cart_repository=cart_repo, transaction_repository=txn_repo,
                         mailer=mailer, configure_logging=False)

        response = TestClient(app).get("/api/cart", headers=auth_headers)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_firebase_token(self, monkeypatch):
        def reject(token, check_revoked=False):
            raise ValueError("bad signature")

        monkeypatch.setattr("storefront.core.auth.fb_auth.verify_id_token", reject)

        with pytest.raises(Unauthorized):
            _decode_id_token("eyJhbGciOi.not.real", allow_mock=False)

    def test_valid_firebase_token(self, monkeypatch):
        def accept(token, check_revoked=False):
            return {"uid": "u-1", "email": "u1@example.com", "firebase": {"sign_in_provider": "password"}}

        monkeypatch.setattr("storefront.core.auth.fb_auth.verify_id_token", accept)

        principal = _token_to_principal(_decode_id_token("real-token", allow_mock=False))
        assert principal.uid == "u-1"
        assert principal.email == "u1@example.com"


class TestSignup:

    def test_signup_creates_user_and_mails_password(self, client, mailer, monkeypatch):
        created = {}

        def fake_create_user(email, password):
            created["email"] = email
            created["password"] = password
            return _FakeUserRecord("uid-42")

        monkeypatch.setattr(auth_router.firebase_auth, "create_user", fake_create_user)

        response = client.post("/signup", json={"email": "new@example.com"})

        assert response.status_code == 200
        assert response.json()["user_id"] == "uid-42"
        assert len(created["password"]) == 10
        assert mailer.sent[0]["to"] == "new@example.com"
        assert mailer.sent[0]["subject"] == "Your Password"
        assert created["password"] in mailer.sent[0]["body"]

    def test_signup_existing_email(self, client, mailer, monkeypatch):
        def exists(email, password):
            raise auth_router.firebase_auth.EmailAlreadyExistsError("exists", None, None)

        monkeypatch.setattr(auth_router.firebase_auth, "create_user", exists)

        response = client.post("/signup", json={"email": "taken@example.com"})

        assert response.status_code == 400
        assert mailer.sent == []

    def test_signup_invalid_email(self, client):
        response = client.post("/signup", json={"email": "not-an-email"})
        assert response.status_code == 400

    def test_signup_mail_failure(self, client, mailer, monkeypatch):
        monkeypatch.setattr(auth_router.firebase_auth, "create_user",
                            lambda email, password: _FakeUserRecord("uid-1"))
        mailer.should_succeed = False

        response = client.post("/signup", json={"email": "new@example.com"})

        assert response.status_code == 500

    def test_generated_password_is_alphanumeric(self):
        password = auth_router.generate_random_password()

        assert len(password) == 10
        assert password.isalnum()


class TestLogin:

    def test_login_sets_authorization_header(self, client, monkeypatch):
        async def fake_sign_in(api_key, email, password):
            assert api_key == "test-web-key"
            return 200, {"idToken": "id-123", "refreshToken": "ref-456", "expiresIn": "3600", "localId": "uid-1"}

        monkeypatch.setattr(auth_router, "_sign_in_with_password", fake_sign_in)

        response = client.post("/login", json={"email": "a@example.com", "password": "secret1"})

        assert response.status_code == 200
        assert response.headers["Authorization"] == "Bearer id-123"
        body = response.json()
        assert body["id_token"] == "id-123"
        assert body["expires_in"] == 3600

    def test_login_wrong_password(self, client, monkeypatch):
        async def fake_sign_in(api_key, email, password):
            return 400, {"error": {"message": "INVALID_PASSWORD"}}

        monkeypatch.setattr(auth_router, "_sign_in_with_password", fake_sign_in)

        response = client.post("/login", json={"email": "a@example.com", "password": "wrong-one"})

        assert response.status_code == 401

    def test_login_upstream_unreachable(self, client, monkeypatch):
        async def fake_sign_in(api_key, email, password):
            raise httpx.ConnectError("connection refused")

        monkeypatch.setattr(auth_router, "_sign_in_with_password", fake_sign_in)

        response = client.post("/login", json={"email": "a@example.com", "password": "secret1"})

        assert response.status_code == 500

    def test_login_upstream_non_json_reply(self, client, monkeypatch):
        async def fake_sign_in(api_key, email, password):
            raise json.JSONDecodeError("Expecting value", "<html>502 Bad Gateway</html>", 0)

        monkeypatch.setattr(auth_router, "_sign_in_with_password", fake_sign_in)

        response = client.post("/login", json={"email": "a@example.com", "password": "secret1"})

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Login service error")

    def test_login_short_password(self, client):
        response = client.post("/login", json={"email": "a@example.com", "password": "123"})
        assert response.status_code == 400
