import logging
import uuid
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from api.admin.admin_model import Admin
from api.otp.otp_model import OTPPurpose
from api.otp.otp_service import issue_otp, consume_otp, delete_otp
from helpers.password_helper import hash_password, verify_password
from helpers.token_helper import create_admin_token

logger = logging.getLogger(__name__)


def get_admin_by_email(db: Session, email: str) -> Optional[Admin]:
    return db.query(Admin).filter(Admin.email == email).first()


def get_admin_by_id(db: Session, admin_id: uuid.UUID) -> Optional[Admin]:
    return db.query(Admin).filter(Admin.id == admin_id).first()


def _send_otp(db: Session, mailer, admin: Admin, purpose: OTPPurpose) -> None:
    otp = issue_otp(db, admin.email, purpose)
    mailer.send(admin.email, otp.code, admin.name, purpose)


# ─── Signup ────────────────────────────────────────────────────────────────────
def signup(db: Session, mailer, name: str, email: str, password: str) -> Admin:
    """
    Create an unverified admin and mail a signup OTP.
    """
    if get_admin_by_email(db, email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin with this email already exists"
        )

    admin = Admin(
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_verified=False
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent signup for the same email
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin with this email already exists"
        )
    db.refresh(admin)
    logger.info("Admin %s signed up as %s", admin.id, admin.email)

    _send_otp(db, mailer, admin, OTPPurpose.signup)
    return admin


def verify_signup_otp(db: Session, email: str, code: str) -> Admin:
    record = consume_otp(db, email, code, OTPPurpose.signup)

    admin = get_admin_by_email(db, email)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin not found"
        )

    admin.is_verified = True
    delete_otp(db, record)
    db.refresh(admin)
    logger.info("Admin %s verified", admin.id)
    return admin


# ─── Login ─────────────────────────────────────────────────────────────────────
def login(db: Session, mailer, email: str, password: str) -> Admin:
    """
    Check credentials and mail a login OTP. Unverified accounts are turned
    away before the password is looked at.
    """
    admin = get_admin_by_email(db, email)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    if not admin.is_verified:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please verify your account first"
        )

    if not verify_password(password, admin.password_hash):
        logger.info("Password mismatch for %s", email)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    _send_otp(db, mailer, admin, OTPPurpose.login)
    return admin


def verify_login_otp(db: Session, email: str, code: str) -> Tuple[str, Admin]:
    record = consume_otp(db, email, code, OTPPurpose.login)

    admin = get_admin_by_email(db, email)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin not found"
        )

    token = create_admin_token(admin)
    delete_otp(db, record)
    logger.info("Admin %s logged in", admin.id)
    return token, admin


# ─── Password reset ────────────────────────────────────────────────────────────
def forgot_password(db: Session, mailer, email: str) -> Admin:
    admin = get_admin_by_email(db, email)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin with this email does not exist"
        )

    _send_otp(db, mailer, admin, OTPPurpose.forgot_password)
    return admin


def verify_forgot_password_otp(db: Session, email: str, code: str) -> None:
    """
    Consume a forgot-password OTP. The password itself is changed by a
    separate `reset_password` call.
    """
    record = consume_otp(db, email, code, OTPPurpose.forgot_password)
    delete_otp(db, record)


def reset_password(db: Session, email: str, new_password: str) -> Admin:
    # TODO: require a short-lived reset grant from verify_forgot_password_otp;
    # any caller that knows the email can currently reach this.
    admin = get_admin_by_email(db, email)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found"
        )

    admin.password_hash = hash_password(new_password)
    db.commit()
    db.refresh(admin)
    logger.info("Password reset for admin %s", admin.id)
    return admin
