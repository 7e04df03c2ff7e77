"""
Unit tests for authentication endpoints and token handling.

Tests:
- Login with username or email
- Inactive accounts
- Current account profile
- Token validation (bad signature, role mismatch, unknown role)
"""

from datetime import timedelta

from app.core.security import create_access_token, decode_token, get_password_hash, verify_password
from app.models.account import AccountRole

TEST_PASSWORD = "Password123!"


class TestPasswordHashing:
    """bcrypt hashing helpers"""

    def test_hash_and_verify(self):
        hashed = get_password_hash("S3cret-pass")
        assert hashed != "S3cret-pass"
        assert verify_password("S3cret-pass", hashed)
        assert not verify_password("wrong", hashed)

    def test_long_passwords_are_truncated_consistently(self):
        long_password = "x" * 100
        hashed = get_password_hash(long_password)
        assert verify_password(long_password, hashed)


class TestLogin:
    """Test login endpoint"""

    def test_login_with_username(self, client, make_account):
        account = make_account("alumni1")

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "alumni1", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["account"]["id"] == account.id
        assert data["account"]["role"] == "alumni"

        payload = decode_token(data["access_token"])
        assert payload["sub"] == str(account.id)
        assert payload["role"] == "alumni"

    def test_login_with_email(self, client, make_account):
        make_account("alumni2")

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "alumni2@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200

    def test_login_wrong_password(self, client, make_account):
        make_account("alumni3")

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "alumni3", "password": "WrongPass!"}
        )

        assert response.status_code == 401

    def test_login_unknown_account(self, client, db_session):
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "ghost", "password": TEST_PASSWORD}
        )

        assert response.status_code == 401

    def test_login_inactive_account(self, client, make_account):
        make_account("sleeper", is_active=False)

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "sleeper", "password": TEST_PASSWORD}
        )

        assert response.status_code == 403

    def test_token_carries_person_id(self, client, make_account, make_person):
        account = make_account("linked")
        person = make_person(account=account)

        response = client.post(
            "/api/v1/auth/login",
            json={"username": "linked", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["account"]["person_id"] == person.id
        assert decode_token(response.json()["access_token"])["person_id"] == person.id


class TestCurrentAccount:
    """GET /auth/me and token validation"""

    def test_me(self, client, make_account, auth_headers):
        account = make_account("me")

        response = client.get("/api/v1/auth/me", headers=auth_headers(account))

        assert response.status_code == 200
        assert response.json()["username"] == "me"

    def test_me_without_token(self, client, db_session):
        response = client.get("/api/v1/auth/me")
        assert response.status_code in (401, 403)

    def test_me_with_garbage_token(self, client, db_session):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, make_account):
        account = make_account("late")
        token = create_access_token(
            data={"sub": str(account.id), "role": "alumni"},
            expires_delta=timedelta(minutes=-5)
        )

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_role_claim_must_match_account(self, client, make_account):
        """An alumni token that claims admin is rejected"""
        account = make_account("climber")
        token = create_access_token(data={"sub": str(account.id), "role": "admin"})

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_unknown_role_claim_is_rejected(self, client, make_account):
        account = make_account("odd")
        token = create_access_token(data={"sub": str(account.id), "role": "superuser"})

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403

    def test_deactivated_account_token_is_rejected(self, client, db_session, make_account, auth_headers):
        account = make_account("deactivated")
        headers = auth_headers(account)
        account.is_active = False
        db_session.commit()

        response = client.get("/api/v1/auth/me", headers=headers)

        assert response.status_code == 403

    def test_admin_profile(self, client, admin_account, auth_headers):
        response = client.get("/api/v1/auth/me", headers=auth_headers(admin_account))

        assert response.status_code == 200
        assert response.json()["role"] == AccountRole.ADMIN.value
