"""
Account endpoints: registration, login, logout, profile and password reset.
"""

import re

from src.database import SessionLocal
from src.auth.service import UserService

RESET_LINK = re.compile(r"/reset-password/([0-9a-f]{64})")

def test_register_returns_token_and_user(client):
    response = client.post("/api/auth/register", json={
        "name": "Meera Joshi",
        "email": "Meera@Yatri.in",
        "password": "secret123"
    })
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["token"]
    assert body["user"]["email"] == "meera@yatri.in"
    assert body["user"]["role"] == "user"
    assert "password" not in body["user"]
    assert "passwordHash" not in body["user"]

def test_register_duplicate_email(client, register):
    register(email="meera@yatri.in")
    response = client.post("/api/auth/register", json={
        "name": "Someone Else",
        "email": "MEERA@yatri.in",
        "password": "another1"
    })
    assert response.status_code == 409
    assert response.json() == {"status": "error", "message": "User already exists"}

def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={"name": "Meera", "email": "meera@yatri.in", "password": "123"})
    assert response.status_code == 400
    assert response.json()["status"] == "error"

def test_login_reuses_live_session(client, register):
    token = register()
    response = client.post("/api/auth/login", json={"email": "asha@yatri.in", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["token"] == token
    assert response.json()["message"] == "User already logged in"

def test_login_wrong_password(client, register):
    register()
    response = client.post("/api/auth/login", json={"email": "asha@yatri.in", "password": "wrong-one"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"

def test_login_unknown_user(client):
    response = client.post("/api/auth/login", json={"email": "nobody@yatri.in", "password": "secret123"})
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"

def test_new_session_signs_out_other_device(client, register, auth):
    old_token = register()
    response = client.post("/api/auth/login", json={
        "email": "asha@yatri.in",
        "password": "secret123",
        "newSession": True
    })
    new_token = response.json()["token"]

    assert response.json()["message"] == "Login successful"
    assert new_token != old_token

    stale = client.post("/api/auth/me", headers=auth(old_token))
    assert stale.status_code == 401
    assert stale.json()["message"] == "Session was signed in on another device"
    assert client.post("/api/auth/me", headers=auth(new_token)).status_code == 200

def test_profile(client, register, auth):
    token = register()
    response = client.post("/api/auth/me", headers=auth(token))

    assert response.status_code == 200
    profile = response.json()
    assert profile["name"] == "Asha Verma"
    assert profile["email"] == "asha@yatri.in"
    assert "createdAt" in profile and "updatedAt" in profile

def test_logout_then_token_is_dead(client, register, auth):
    token = register()

    response = client.post("/api/auth/logout", headers=auth(token))
    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Logout successful"}

    assert client.post("/api/auth/me", headers=auth(token)).status_code == 401
    again = client.post("/api/auth/logout", headers=auth(token))
    assert again.status_code == 401
    assert again.json()["message"] == "Already logged out"

def test_password_reset_flow(client, register, mailer):
    register()

    response = client.post("/api/auth/forgotPassword", json={"email": "asha@yatri.in"})
    assert response.status_code == 200
    assert len(mailer.outbox) == 1
    assert mailer.outbox[0]["to"] == "asha@yatri.in"
    token = RESET_LINK.search(mailer.outbox[0]["text"]).group(1)

    verify = client.get(f"/api/auth/verifyResetToken/{token}")
    assert verify.status_code == 200
    assert verify.json()["data"] == {"email": "asha@yatri.in"}

    mismatch = client.post(f"/api/auth/resetPassword/{token}", json={
        "password": "newpass1",
        "confirmPassword": "newpass2"
    })
    assert mismatch.status_code == 400
    assert "Passwords do not match" in mismatch.json()["message"]

    reset = client.post(f"/api/auth/resetPassword/{token}", json={
        "password": "newpass1",
        "confirmPassword": "newpass1"
    })
    assert reset.status_code == 200

    reused = client.post(f"/api/auth/resetPassword/{token}", json={
        "password": "newpass3",
        "confirmPassword": "newpass3"
    })
    assert reused.status_code == 400
    assert reused.json()["message"] == "Token is invalid or has expired"

    old = client.post("/api/auth/login", json={"email": "asha@yatri.in", "password": "secret123"})
    assert old.status_code == 401
    new = client.post("/api/auth/login", json={"email": "asha@yatri.in", "password": "newpass1"})
    assert new.status_code == 200

def test_reset_token_is_stored_hashed(client, register, mailer):
    register()
    client.post("/api/auth/forgotPassword", json={"email": "asha@yatri.in"})
    token = RESET_LINK.search(mailer.outbox[0]["text"]).group(1)

    session = SessionLocal()
    try:
        user = UserService.get_user_by_email(session, "asha@yatri.in")
        assert user.reset_password_token is not None
        assert user.reset_password_token != token
    finally:
        session.close()

def test_forgot_password_unknown_email_is_silent(client, mailer):
    response = client.post("/api/auth/forgotPassword", json={"email": "ghost@yatri.in"})
    assert response.status_code == 200
    assert response.json()["status"] == "success"
    assert mailer.outbox == []

def test_forgot_password_rolls_back_when_mail_fails(client, register, mailer):
    register()
    mailer.fail = True

    response = client.post("/api/auth/forgotPassword", json={"email": "asha@yatri.in"})
    assert response.status_code == 500
    assert response.json()["status"] == "error"

    session = SessionLocal()
    try:
        user = UserService.get_user_by_email(session, "asha@yatri.in")
        assert user.reset_password_token is None
        assert user.reset_password_expires is None
    finally:
        session.close()

def test_unknown_reset_token(client):
    response = client.get(f"/api/auth/verifyResetToken/{'0' * 64}")
    assert response.status_code == 400
