# api/otp/otp_service.py
import datetime
import logging
import secrets
import string
from typing import Optional, Union

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.otp.otp_model import OTP, OTPPurpose, utcnow
from config.settings import settings

logger = logging.getLogger(__name__)

ISSUE_ATTEMPTS = 2


def generate_otp_code(length: int = None) -> str:
    """Random decimal code of `length` digits (defaults to OTP_LENGTH)."""
    length = length or settings.OTP_LENGTH
    return "".join(secrets.choice(string.digits) for _ in range(length))


def _purpose_value(purpose: Union[OTPPurpose, str]) -> str:
    return OTPPurpose(purpose).value


def get_live_otps(
    db: Session,
    email: str,
    purpose: Union[OTPPurpose, str],
    now: Optional[datetime.datetime] = None,
) -> list:
    """Unexpired records for (email, purpose); at most one by the unique index."""
    return (
        db.query(OTP)
          .filter_by(email=email, purpose=_purpose_value(purpose))
          .filter(OTP.expires_at >= (now or utcnow()))
          .all()
    )


def issue_otp(
    db: Session,
    email: str,
    purpose: Union[OTPPurpose, str],
    now: Optional[datetime.datetime] = None,
) -> OTP:
    """
    Replace whatever OTP exists for (email, purpose) with a fresh one.

    The old records are removed and committed before the new one is written,
    so an interruption between the two steps leaves no live code rather than two.
    The unique (email, purpose) index rejects the insert when an overlapping
    request got there first; the delete and insert are then retried once.
    """
    purpose = _purpose_value(purpose)
    now = now or utcnow()

    for attempt in range(1, ISSUE_ATTEMPTS + 1):
        # 1) Drop previous codes for this purpose
        removed = (
            db.query(OTP)
              .filter_by(email=email, purpose=purpose)
              .delete()
        )
        db.commit()
        if removed:
            logger.debug("Replaced %d previous %s OTP(s) for %s", removed, purpose, email)

        # 2) Persist the new code
        otp = OTP(
            email=email,
            code=generate_otp_code(),
            purpose=purpose,
            expires_at=now + datetime.timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
            created_at=now,
            attempts=0,
        )
        db.add(otp)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Concurrent %s OTP issue for %s (attempt %d/%d)",
                purpose, email, attempt, ISSUE_ATTEMPTS
            )
            continue

        db.refresh(otp)
        logger.info("Issued %s OTP for %s, expires at %s", purpose, email, otp.expires_at.isoformat())
        return otp

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Could not issue OTP, please try again"
    )


def _invalid_otp() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid OTP"
    )


def consume_otp(
    db: Session,
    email: str,
    code: str,
    purpose: Union[OTPPurpose, str],
    now: Optional[datetime.datetime] = None,
) -> OTP:
    """
    Check `code` against the OTP held for (email, purpose) and check its expiry.

    Returns the live record; the caller removes it with `delete_otp` once the
    step it guards has succeeded. An expired record is deleted here, and so is
    a record that has seen OTP_MAX_ATTEMPTS wrong codes.
    """
    purpose = _purpose_value(purpose)
    record = (
        db.query(OTP)
          .filter_by(email=email, purpose=purpose)
          .first()
    )
    if not record:
        logger.info("Rejected %s OTP for %s: none issued", purpose, email)
        raise _invalid_otp()

    if not secrets.compare_digest(record.code.encode(), code.encode()):
        record.attempts = (record.attempts or 0) + 1
        if record.attempts >= settings.OTP_MAX_ATTEMPTS:
            logger.warning("Discarding %s OTP for %s after %d wrong codes", purpose, email, record.attempts)
            db.delete(record)
        else:
            logger.info("Rejected %s OTP for %s: wrong code (%d)", purpose, email, record.attempts)
        db.commit()
        raise _invalid_otp()

    if record.is_expired(now):
        logger.info("Rejected %s OTP for %s: expired at %s", purpose, email, record.expires_at.isoformat())
        db.delete(record)
        db.commit()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="OTP has expired"
        )

    return record


def delete_otp(db: Session, record: OTP) -> None:
    """Delete a consumed OTP and commit any pending changes with it."""
    db.delete(record)
    db.commit()


def purge_expired_otps(db: Session, now: Optional[datetime.datetime] = None) -> int:
    now = now or utcnow()
    removed = (
        db.query(OTP)
          .filter(OTP.expires_at < now)
          .delete()
    )
    db.commit()
    return removed
