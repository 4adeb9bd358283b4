# helpers/mail_helper.py

import html
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from pathlib import Path
from typing import Union

from api.otp.otp_model import OTPPurpose
from config.settings import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

OTP_TEMPLATES = {
    OTPPurpose.signup: ("Verify your admin account", "emails/otp_signup.html"),
    OTPPurpose.login: ("Your login verification code", "emails/otp_login.html"),
    OTPPurpose.forgot_password: ("Reset your password", "emails/otp_reset.html"),
}


def render_template(template_name: str, **kwargs) -> str:
    template_path = TEMPLATE_DIR / template_name
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    body = template_path.read_text(encoding="utf-8")

    # values are user-supplied (display names), never markup
    for key, value in kwargs.items():
        body = body.replace(f"{{{{ {key} }}}}", html.escape(str(value)))

    return body


def send_email(to_email: str, subject: str, body: str, html: bool = False):
    msg = MIMEMultipart()
    msg["From"] = formataddr((settings.EMAIL_NAME, settings.EMAIL_FROM))
    msg["To"] = to_email
    msg["Subject"] = subject

    if html:
        msg.attach(MIMEText(body, "html"))   # send as HTML
    else:
        msg.attach(MIMEText(body, "plain"))  # fallback to plain text

    with smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=settings.EMAIL_TIMEOUT) as server:
        if settings.EMAIL_USE_TLS:
            server.starttls()
        if settings.EMAIL_USER:
            server.login(settings.EMAIL_USER, settings.EMAIL_PASSWORD)
        server.send_message(msg)


class OtpMailer:
    """Delivers OTP codes through the configured SMTP relay."""

    def send(self, email: str, code: str, display_name: str, purpose: Union[OTPPurpose, str]) -> None:
        purpose = OTPPurpose(purpose)
        subject, template = OTP_TEMPLATES[purpose]
        html_body = render_template(
            template,
            name=display_name,
            otp=code,
            expire_minutes=settings.OTP_EXPIRE_MINUTES,
            app_name=settings.APP_NAME,
        )
        send_email(email, f"[{settings.APP_NAME}] {subject}", html_body, html=True)
        logger.info("Sent %s OTP email to %s", purpose.value, email)


class ConsoleOtpMailer:
    """Development backend: writes the code to the log instead of mailing it."""

    def send(self, email: str, code: str, display_name: str, purpose: Union[OTPPurpose, str]) -> None:
        purpose = OTPPurpose(purpose)
        logger.warning("[console mail] %s OTP for %s <%s>: %s", purpose.value, display_name, email, code)


def get_otp_mailer():
    if settings.EMAIL_BACKEND == "console":
        return ConsoleOtpMailer()
    return OtpMailer()
