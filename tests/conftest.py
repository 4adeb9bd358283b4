"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation; must be set before app imports
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_for_testing_only_0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EMAIL_BACKEND", "console")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("OTP_CLEANUP_ENABLED", "false")

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, get_db
import api.admin.admin_model  # noqa: F401
import api.otp.otp_model  # noqa: F401
from api.otp.otp_model import OTPPurpose
from helpers.mail_helper import get_otp_mailer

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingMailer:
    """Stands in for the SMTP gateway and keeps every OTP it was asked to send."""

    def __init__(self):
        self.sent = []

    def send(self, email, code, display_name, purpose):
        self.sent.append({
            "email": email,
            "code": code,
            "display_name": display_name,
            "purpose": OTPPurpose(purpose).value,
        })

    def last_code(self, email, purpose):
        purpose = OTPPurpose(purpose).value
        for message in reversed(self.sent):
            if message["email"] == email and message["purpose"] == purpose:
                return message["code"]
        return None


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db):
    """Opens extra sessions on the test database, e.g. to stand in for a second request."""
    sessions = []

    def factory():
        session = TestingSessionLocal()
        sessions.append(session)
        return session

    yield factory
    for session in sessions:
        session.close()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def client(db, mailer):
    from main import app

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_otp_mailer] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def verified_admin(db, mailer):
    """An admin that has completed signup verification."""
    from api.admin import admin_service

    admin = admin_service.signup(db, mailer, "Ada", "ada@example.com", "s3cret-pass")
    admin_service.verify_signup_otp(db, admin.email, mailer.last_code(admin.email, "signup"))
    return admin
