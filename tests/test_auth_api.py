from datetime import timedelta

from app.core.security import SecurityUtils
from app.models import User, UserProgress
from app.utils.time import utcnow

API = "/api/v1"


def test_signup_creates_user_with_progress(client, db):
    response = client.post(
        f"{API}/auth/signup",
        json={"name": "Ngozi", "email": "Ngozi@Example.com", "password": "secret123"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["email"] == "ngozi@example.com"
    assert body["user"]["isPremium"] is False

    user = db.query(User).filter(User.email == "ngozi@example.com").one()
    assert db.query(UserProgress).filter(UserProgress.user_id == user.id).count() == 1


def test_duplicate_signup_is_a_conflict(client, user):
    response = client.post(
        f"{API}/auth/signup", json={"email": user.email, "password": "another123"}
    )

    assert response.status_code == 409


def test_short_password_is_rejected(client):
    response = client.post(f"{API}/auth/signup", json={"email": "x@example.com", "password": "123"})

    assert response.status_code == 400


def test_signin_and_me(client, user):
    response = client.post(
        f"{API}/auth/signin", json={"email": user.email, "password": "secret123"}
    )
    assert response.status_code == 200

    token = response.json()["token"]
    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user.id


def test_signin_with_wrong_password(client, user):
    response = client.post(f"{API}/auth/signin", json={"email": user.email, "password": "nope"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


def test_invalid_token_is_unauthorized(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_forgot_password_answer_is_the_same_for_unknown_email(client, user):
    known = client.post(f"{API}/auth/forgot-password", json={"email": user.email})
    unknown = client.post(f"{API}/auth/forgot-password", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


def test_password_reset_flow(client, db, user, monkeypatch):
    monkeypatch.setattr(SecurityUtils, "generate_reset_token", staticmethod(lambda: "known-token"))
    client.post(f"{API}/auth/forgot-password", json={"email": user.email})

    db.refresh(user)
    assert user.reset_token_hash == SecurityUtils.hash_token("known-token")

    response = client.post(f"{API}/auth/reset-password/known-token", json={"password": "brandnew1"})
    assert response.status_code == 200

    signin = client.post(f"{API}/auth/signin", json={"email": user.email, "password": "brandnew1"})
    assert signin.status_code == 200

    reused = client.post(f"{API}/auth/reset-password/known-token", json={"password": "again123"})
    assert reused.status_code == 400


def test_expired_reset_token_is_rejected(client, db, user):
    user.reset_token_hash = SecurityUtils.hash_token("old-token")
    user.reset_token_expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.post(f"{API}/auth/reset-password/old-token", json={"password": "brandnew1"})

    assert response.status_code == 400
