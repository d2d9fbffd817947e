from email.message import EmailMessage
from html import escape
from typing import Optional
import smtplib
import structlog

from src.config import settings
from src.exceptions import DependencyError

logger = structlog.get_logger(__name__)

BRAND = "Ghumakkad Yatri"

class EmailService:
    """Outbound transactional email over SMTP"""

    def __init__(
        self,
        host: str = None,
        port: int = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: str = None,
        use_tls: bool = None,
        timeout: float = 10.0
    ):
        self.host = host or settings.EMAIL_HOST
        self.port = port or settings.EMAIL_PORT
        self.username = username if username is not None else settings.EMAIL_USER
        self.password = password if password is not None else settings.EMAIL_PASS
        self.sender = sender or settings.EMAIL_FROM
        self.use_tls = settings.EMAIL_USE_TLS if use_tls is None else use_tls
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text or subject)
        message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("email_send_failed", to=to, subject=subject, error=str(e), error_type=type(e).__name__)
            raise DependencyError()

        logger.info("email_sent", to=to, subject=subject)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------
    def send_password_reset_email(self, to: str, reset_token: str, user_name: Optional[str] = None) -> None:
        reset_url = f"{settings.FRONTEND_URL}/reset-password/{reset_token}"
        name = escape(user_name or "Traveler")
        html = f"""
        <html>
        <body style="font-family: Arial, sans-serif; color: #333;">
            <h1>{BRAND}</h1>
            <h2>Password Reset Request</h2>
            <p>Hello {name},</p>
            <p>We received a request to reset your password. If you didn't make this request, you can safely ignore this email.</p>
            <p><a href="{reset_url}">Reset My Password</a></p>
            <p>Or copy and paste this link into your browser:<br>{reset_url}</p>
            <p><strong>Important:</strong> This link will expire in {settings.RESET_TOKEN_EXPIRE_MINUTES} minutes.</p>
        </body>
        </html>
        """
        text = (
            f"Hello {user_name or 'Traveler'},\n\n"
            f"Reset your {BRAND} password here: {reset_url}\n"
            f"This link will expire in {settings.RESET_TOKEN_EXPIRE_MINUTES} minutes."
        )
        self.send(to, f"Password Reset Request - {BRAND}", html, text)

    def send_contact_form_email(
        self,
        name: str,
        email: str,
        subject: str,
        message: str,
        phone: Optional[str] = None
    ) -> None:
        rows = [("Name", name), ("Email", email)]
        if phone:
            rows.append(("Phone", phone))
        rows.append(("Subject", subject))
        table = "".join(
            f"<tr><td><strong>{label}:</strong></td><td>{escape(value)}</td></tr>" for label, value in rows
        )
        html = f"""
        <html>
        <body style="font-family: Arial, sans-serif; color: #333;">
            <h1>{BRAND}</h1>
            <h2>New Contact Form Submission</h2>
            <table>{table}</table>
            <h3>Message:</h3>
            <p style="white-space: pre-wrap;">{escape(message)}</p>
        </body>
        </html>
        """
        text = "\n".join(f"{label}: {value}" for label, value in rows) + f"\n\nMessage:\n{message}"
        inbox = settings.EMAIL_USER or self.sender
        self.send(inbox, f"New Contact Form Submission: {subject}", html, text)

    def send_booking_confirmation_email(
        self,
        to: str,
        user_name: str,
        booking_id: int,
        package_title: str,
        travel_date: str,
        total_amount: str
    ) -> None:
        html = f"""
        <html>
        <body style="font-family: Arial, sans-serif; color: #333;">
            <h1>{BRAND}</h1>
            <h2>Booking Confirmed</h2>
            <p>Hello {escape(user_name)},</p>
            <p>Your booking #{booking_id} for <strong>{escape(package_title)}</strong> is confirmed.</p>
            <p>Travel date: {travel_date}<br>Total paid: &#8377;{total_amount}</p>
        </body>
        </html>
        """
        text = (
            f"Hello {user_name},\n\nYour booking #{booking_id} for {package_title} is confirmed.\n"
            f"Travel date: {travel_date}\nTotal paid: {total_amount}"
        )
        self.send(to, f"Booking Confirmed - {BRAND}", html, text)

def get_email_service() -> EmailService:
    return EmailService()
