"""End-to-end tests for the /api/admin endpoints."""

import datetime

from fastapi.testclient import TestClient

from api.otp.otp_model import OTP
from helpers.token_helper import create_access_token


def _signup(client, email="a@x.com", password="pw123456", name="A"):
    return client.post("/api/admin/signup", json={"name": name, "email": email, "password": password})


def _signup_and_verify(client, mailer, email="a@x.com", password="pw123456"):
    _signup(client, email=email, password=password)
    code = mailer.last_code(email, "signup")
    resp = client.post("/api/admin/verify-otp", json={"email": email, "otp": code})
    assert resp.status_code == 200
    return code


def _login(client, mailer, email="a@x.com", password="pw123456"):
    resp = client.post("/api/admin/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    code = mailer.last_code(email, "login")
    resp = client.post("/api/admin/verify-login-otp", json={"email": email, "otp": code})
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_signup_returns_admin_id(client, mailer):
    resp = _signup(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Admin created successfully. OTP sent to email."
    assert body["adminId"]
    assert mailer.sent[0]["purpose"] == "signup"


def test_signup_normalizes_email(client, mailer):
    _signup(client, email="Mixed@Corp.COM")
    assert mailer.sent[0]["email"] == "mixed@corp.com"


def test_signup_ignores_extra_form_fields(client):
    resp = client.post("/api/admin/signup", json={
        "name": "A", "email": "a@x.com", "password": "pw123456", "confirmPassword": "pw123456"
    })
    assert resp.status_code == 201


def test_duplicate_signup(client):
    _signup(client)
    resp = _signup(client)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Admin with this email already exists"}


def test_missing_fields_are_400(client):
    resp = client.post("/api/admin/signup", json={"email": "a@x.com"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "name" in body["message"]
    assert "password" in body["message"]


def test_invalid_email_is_400(client):
    resp = client.post("/api/admin/forgot-password", json={"email": "not-an-email"})
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("email:")


def test_wrong_signup_otp(client, mailer):
    _signup(client)
    code = mailer.last_code("a@x.com", "signup")
    wrong = "000000" if code != "000000" else "111111"

    resp = client.post("/api/admin/verify-otp", json={"email": "a@x.com", "otp": wrong})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid OTP"}


def test_expired_signup_otp(client, mailer, db):
    _signup(client)
    otp = db.query(OTP).one()
    otp.expires_at = datetime.datetime(2000, 1, 1)
    db.commit()

    resp = client.post(
        "/api/admin/verify-otp",
        json={"email": "a@x.com", "otp": mailer.last_code("a@x.com", "signup")},
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "OTP has expired"
    assert db.query(OTP).count() == 0


def test_login_requires_verification(client):
    _signup(client)
    resp = client.post("/api/admin/login", json={"email": "a@x.com", "password": "pw123456"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Please verify your account first"


def test_full_login_flow_and_profile(client, mailer):
    _signup_and_verify(client, mailer)
    body = _login(client, mailer)

    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["admin"]["email"] == "a@x.com"
    assert body["admin"]["isVerified"] is True
    assert "passwordHash" not in body["admin"]

    resp = client.get("/api/admin/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert resp.status_code == 200
    assert resp.json()["admin"]["id"] == body["admin"]["id"]


def test_profile_rejects_bad_tokens(client, mailer):
    resp = client.get("/api/admin/profile", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Invalid token"}

    expired = create_access_token({"adminId": "x"}, datetime.timedelta(seconds=-5))
    resp = client.get("/api/admin/profile", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Token has expired"

    no_subject = create_access_token({"email": "a@x.com"})
    resp = client.get("/api/admin/profile", headers={"Authorization": f"Bearer {no_subject}"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid token payload"


def test_password_reset_flow(client, mailer):
    _signup_and_verify(client, mailer)

    resp = client.post("/api/admin/forgot-password", json={"email": "a@x.com"})
    assert resp.status_code == 200
    code = mailer.last_code("a@x.com", "forgot-password")

    resp = client.post("/api/admin/verify-forgot-password-otp", json={"email": "a@x.com", "otp": code})
    assert resp.status_code == 200
    assert resp.json()["message"] == "OTP verified successfully. You can now reset your password."

    resp = client.post("/api/admin/reset-password", json={"email": "a@x.com", "newPassword": "changed99"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    old = client.post("/api/admin/login", json={"email": "a@x.com", "password": "pw123456"})
    assert old.status_code == 400
    assert old.json()["message"] == "Invalid credentials"
    _login(client, mailer, password="changed99")


def test_forgot_password_unknown_email(client):
    resp = client.post("/api/admin/forgot-password", json={"email": "ghost@x.com"})
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Admin with this email does not exist"}


def test_mail_failure_is_generic_500(client, mailer, monkeypatch):
    from main import app

    def broken_send(*args, **kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(mailer, "send", broken_send)
    unsafe_client = TestClient(app, raise_server_exceptions=False)

    resp = unsafe_client.post("/api/admin/signup", json={"name": "A", "email": "a@x.com", "password": "pw123456"})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}
