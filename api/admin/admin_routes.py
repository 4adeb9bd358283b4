from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from config.database import get_db
from helpers.mail_helper import get_otp_mailer
from middlewares.auth_middleware import auth_middleware
from api.admin.admin_controller import (
    signup_admin,
    verify_signup,
    login_admin,
    verify_login,
    forgot_password_request,
    forgot_password_verify,
    reset_password_controller,
    get_profile_details
)
from api.admin.admin_schema import (
    AdminSignup,
    LoginRequest,
    OTPVerifyRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    Message,
    SignupResponse,
    TokenResponse,
    ProfileResponse
)

router = APIRouter(prefix="/admin", tags=["Admin Authentication"])

# ─── Signup & OTP Verification ─────────────────────────────────────────────────
@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED
)
def signup(
    req: AdminSignup,
    db: Session = Depends(get_db),
    mailer=Depends(get_otp_mailer)
):
    """
    Create an unverified admin and send an OTP to their email.
    """
    return signup_admin(req, db, mailer)

@router.post("/verify-otp", response_model=Message)
def verify_otp(
    req: OTPVerifyRequest,
    db: Session = Depends(get_db)
):
    return verify_signup(req, db)

# ─── Login ─────────────────────────────────────────────────────────────────────
@router.post("/login", response_model=Message)
def login(
    req: LoginRequest,
    db: Session = Depends(get_db),
    mailer=Depends(get_otp_mailer)
):
    return login_admin(req, db, mailer)

@router.post("/verify-login-otp", response_model=TokenResponse)
def verify_login_otp(
    req: OTPVerifyRequest,
    db: Session = Depends(get_db)
):
    """
    Exchange a login OTP for a session token.
    """
    return verify_login(req, db)

# ─── Password reset ────────────────────────────────────────────────────────────
@router.post("/forgot-password", response_model=Message)
def forgot_password(
    req: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    mailer=Depends(get_otp_mailer)
):
    return forgot_password_request(req, db, mailer)

@router.post("/verify-forgot-password-otp", response_model=Message)
def verify_forgot_password_otp(
    req: OTPVerifyRequest,
    db: Session = Depends(get_db)
):
    return forgot_password_verify(req, db)

@router.post("/reset-password", response_model=Message)
def reset_password(
    req: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    return reset_password_controller(req, db)

# ─── Profile (protected) ───────────────────────────────────────────────────────
@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_admin=Depends(auth_middleware)):
    return get_profile_details(current_admin)
