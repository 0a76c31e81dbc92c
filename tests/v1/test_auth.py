# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for signup, login and bearer authentication."""

from fastapi import status

from crush_confessions.core.security import create_access_token
from crush_confessions.models import AccountStatus, User
from tests.factories import DEFAULT_PASSWORD


def test_signup_creates_active_user(client, db_session) -> None:
    """Signup stores a bcrypt hash and an ACTIVE account."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "New.Student@umt.edu.pk", "password": "longenough"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["message"] == "User created successfully"

    user = db_session.get(User, data["userId"])
    assert user is not None
    assert user.email == "new.student@umt.edu.pk"
    assert user.account_status == AccountStatus.ACTIVE
    assert user.password_hash != "longenough"
    assert user.password_hash.startswith("$2")


def test_signup_rejects_foreign_domain(client) -> None:
    """Only campus addresses may register."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "someone@gmail.com", "password": "longenough"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["message"] == "Invalid input"
    assert "email" in data["errors"]
    assert "@umt.edu.pk" in data["errors"]["email"][0]


def test_signup_rejects_short_password(client) -> None:
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "short@umt.edu.pk", "password": "short"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "password" in response.json()["errors"]


def test_signup_duplicate_email_conflicts(client, test_user) -> None:
    """A second signup with the same email, in any case, is a conflict."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "ALICE@umt.edu.pk", "password": "longenough"},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json() == {"message": "User with this email already exists"}


def test_login_returns_usable_token(client, test_user) -> None:
    """Login issues a bearer token accepted by protected endpoints."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@umt.edu.pk", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"

    profile = client.get(
        "/api/v1/profile",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert profile.status_code == status.HTTP_200_OK
    assert profile.json()["profile"]["id"] == test_user.id


def test_login_wrong_password(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@umt.edu.pk", "password": "not-the-password"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid email or password"


def test_login_unknown_email(client) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "ghost@umt.edu.pk", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_refuses_suspended_account(client, user_factory) -> None:
    user_factory("suspended@umt.edu.pk", status=AccountStatus.SUSPENDED)
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "suspended@umt.edu.pk", "password": DEFAULT_PASSWORD},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Account is not active"


def test_protected_endpoint_requires_token(client) -> None:
    """Missing credentials yield 401 with a message body."""
    response = client.get("/api/v1/confessions")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Not authenticated"}


def test_invalid_token_rejected(client) -> None:
    response = client.get(
        "/api/v1/confessions",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Could not validate credentials"


def test_token_for_unknown_user_rejected(client) -> None:
    token = create_access_token("00000000-0000-0000-0000-000000000000")
    response = client.get(
        "/api/v1/confessions",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "User not found"
