import datetime
import enum
from sqlalchemy import Column, Integer, String, DateTime, Index
from config.database import Base


def utcnow() -> datetime.datetime:
    """Naive UTC now; expiry columns are stored without tzinfo."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class OTPPurpose(str, enum.Enum):
    signup          = "signup"
    login           = "login"
    forgot_password = "forgot-password"


class OTP(Base):
    __tablename__ = "otps"
    __table_args__ = (
        Index("ix_otps_email_purpose", "email", "purpose", unique=True),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    code = Column(String(8), nullable=False)
    purpose = Column(String(50), nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    attempts = Column(Integer, nullable=False, default=0, server_default="0")

    def is_expired(self, now: datetime.datetime = None) -> bool:
        # still valid at exactly expires_at
        return (now or utcnow()) > self.expires_at

    def __repr__(self):
        return f"<OTP(email='{self.email}', purpose='{self.purpose}', expires_at={self.expires_at})>"
