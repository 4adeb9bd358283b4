from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
import uuid

# Client forms post the whole form state (e.g. confirmPassword), so unknown keys are dropped
REQUEST_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore"
)


class EmailRequest(BaseModel):
    email: EmailStr = Field(
        ..., description="Admin email address"
    )

    model_config = REQUEST_CONFIG

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


# ----- Signup -----
class AdminSignup(EmailRequest):
    name: str = Field(
        ..., min_length=1, max_length=100, description="Display name"
    )
    password: str = Field(
        ..., min_length=1, max_length=128, description="Plain-text password"
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


# ----- Auth & OTP Schemas -----
class LoginRequest(EmailRequest):
    password: str = Field(
        ..., min_length=1, max_length=128, description="Admin password"
    )


class OTPVerifyRequest(EmailRequest):
    otp: str = Field(
        ..., pattern=r"^\d{4,8}$", description="Numeric code from the OTP email"
    )


class ForgotPasswordRequest(EmailRequest):
    pass


class ResetPasswordRequest(EmailRequest):
    new_password: str = Field(
        ..., min_length=1, max_length=128, description="New password"
    )


# ----- Response Schemas -----
class AdminResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    is_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )


class Message(BaseModel):
    success: bool = True
    message: str

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )


class SignupResponse(Message):
    admin_id: uuid.UUID


class TokenResponse(Message):
    token: str
    admin: AdminResponse


class ProfileResponse(BaseModel):
    success: bool = True
    admin: AdminResponse
