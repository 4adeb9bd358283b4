from sqlalchemy.orm import Session

from api.admin.admin_schema import (
    AdminSignup,
    AdminResponse,
    LoginRequest,
    OTPVerifyRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest
)
from api.admin import admin_service
from api.admin.admin_model import Admin

# Controller functions for admin authentication

# Step 1: create admin and send signup OTP
def signup_admin(req: AdminSignup, db: Session, mailer) -> dict:
    admin = admin_service.signup(db, mailer, req.name, req.email, req.password)
    return {
        "success": True,
        "message": "Admin created successfully. OTP sent to email.",
        "admin_id": admin.id
    }

# Step 2: verify signup OTP
def verify_signup(req: OTPVerifyRequest, db: Session) -> dict:
    admin_service.verify_signup_otp(db, req.email, req.otp)
    return {"success": True, "message": "Account verified successfully"}


def login_admin(req: LoginRequest, db: Session, mailer) -> dict:
    admin_service.login(db, mailer, req.email, req.password)
    return {"success": True, "message": "OTP sent to your email for login verification"}


def verify_login(req: OTPVerifyRequest, db: Session) -> dict:
    token, admin = admin_service.verify_login_otp(db, req.email, req.otp)
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "admin": AdminResponse.model_validate(admin)
    }


def forgot_password_request(req: ForgotPasswordRequest, db: Session, mailer) -> dict:
    admin_service.forgot_password(db, mailer, req.email)
    return {"success": True, "message": "OTP sent to your email for password reset"}


def forgot_password_verify(req: OTPVerifyRequest, db: Session) -> dict:
    admin_service.verify_forgot_password_otp(db, req.email, req.otp)
    return {
        "success": True,
        "message": "OTP verified successfully. You can now reset your password."
    }


def reset_password_controller(req: ResetPasswordRequest, db: Session) -> dict:
    admin_service.reset_password(db, req.email, req.new_password)
    return {"success": True, "message": "Password reset successful. You can now log in."}


def get_profile_details(current_admin: Admin) -> dict:
    return {"success": True, "admin": AdminResponse.model_validate(current_admin)}
