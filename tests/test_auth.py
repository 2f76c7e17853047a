"""
Tests for User Authentication

- Registration (POST /api/v1/auth/register)
- Login with the OAuth2 password form (POST /api/v1/auth/login)
- Current user (GET /api/v1/auth/me)
- Token handling in the auth dependencies
"""

from datetime import timedelta

from fastapi import status
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookreviews.config import get_settings
from bookreviews.models import User
from bookreviews.services.security import ALGORITHM, create_access_token, verify_password

settings = get_settings()


def get_auth_header(user: User) -> dict:
    """Create authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, **overrides):
    payload = {
        "email": "reader@example.com",
        "username": "reader",
        "password": "SecurePass123",
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


class TestRegistration:
    """Tests for POST /api/v1/auth/register"""

    def test_register_success(self, client: TestClient):
        response = register(client, full_name="Avid Reader")

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == "reader@example.com"
        assert data["username"] == "reader"
        assert data["full_name"] == "Avid Reader"
        assert data["is_active"] is True
        assert "password" not in data
        assert "hashed_password" not in data

    def test_password_stored_as_hash(self, client: TestClient, db_session: Session):
        register(client)

        user = db_session.execute(
            select(User).where(User.email == "reader@example.com")
        ).scalar_one()
        assert user.hashed_password != "SecurePass123"
        assert verify_password("SecurePass123", user.hashed_password)

    def test_register_duplicate_email(self, client: TestClient):
        register(client)

        response = register(client, username="another")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "Email" in response.json()["detail"]

    def test_register_duplicate_username(self, client: TestClient):
        register(client)

        response = register(client, email="other@example.com")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "Username" in response.json()["detail"]

    def test_username_normalized_to_lowercase(self, client: TestClient):
        response = register(client, username="BookLover")

        assert response.json()["username"] == "booklover"

    def test_weak_password_rejected(self, client: TestClient):
        response = register(client, password="alllowercase1")

        assert response.status_code == 422

    def test_invalid_email_rejected(self, client: TestClient):
        response = register(client, email="not-an-email")

        assert response.status_code == 422


class TestLogin:
    """Tests for POST /api/v1/auth/login"""

    def test_login_success(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/auth/login",
            data={  # OAuth2 uses form data, not JSON
                "username": sample_user.email,
                "password": "SecurePass123",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0

        me = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert me.json()["id"] == sample_user.id

    def test_login_records_last_login(
        self, client: TestClient, db_session: Session, sample_user: User
    ):
        assert sample_user.last_login_at is None

        client.post(
            "/api/v1/auth/login",
            data={"username": sample_user.email, "password": "SecurePass123"},
        )

        db_session.refresh(sample_user)
        assert sample_user.last_login_at is not None

    def test_login_wrong_password(self, client: TestClient, sample_user: User):
        response = client.post(
            "/api/v1/auth/login",
            data={"username": sample_user.email, "password": "WrongPass123"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_unknown_email(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/login",
            data={"username": "nobody@example.com", "password": "SecurePass123"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(
        self, client: TestClient, db_session: Session, sample_user: User
    ):
        sample_user.is_active = False
        db_session.commit()

        response = client.post(
            "/api/v1/auth/login",
            data={"username": sample_user.email, "password": "SecurePass123"},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestCurrentUser:
    """Tests for GET /api/v1/auth/me"""

    def test_me(self, client: TestClient, sample_user: User):
        response = client.get("/api/v1/auth/me", headers=get_auth_header(sample_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["username"] == sample_user.username

    def test_me_without_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_with_garbage_token(self, client: TestClient):
        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_with_expired_token(self, client: TestClient, sample_user: User):
        token = create_access_token(
            {"sub": str(sample_user.id)},
            expires_delta=timedelta(minutes=-1),
        )

        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_for_deleted_user(self, client: TestClient):
        token = create_access_token({"sub": "99999"})

        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_with_non_access_token(self, client: TestClient, sample_user: User):
        token = jwt.encode(
            {"sub": str(sample_user.id), "type": "refresh"},
            settings.secret_key,
            algorithm=ALGORITHM,
        )

        response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
