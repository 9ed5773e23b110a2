"""Email notifications for adoption decisions and password resets."""

import logging
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr
from html import escape

from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.exceptions import NotificationError


logger = logging.getLogger(__name__)


_LAYOUT = """\
<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: {header_colour}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
    .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
    .button {{ display: inline-block; padding: 12px 30px; background: #10b981; color: white; text-decoration: none; border-radius: 5px; margin: 20px 0; }}
    .badge {{ background: #d1fae5; color: #065f46; padding: 10px 20px; border-radius: 5px; display: inline-block; margin: 15px 0; font-weight: bold; }}
    .footer {{ text-align: center; margin-top: 20px; color: #6b7280; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>{brand}</h1></div>
    <div class="content">
{body}
    </div>
    <div class="footer">
      <p>&copy; {year} {brand}. All rights reserved.</p>
    </div>
  </div>
</body>
</html>
"""

_GREEN = "linear-gradient(135deg, #10b981 0%, #14b8a6 100%)"
_RED = "linear-gradient(135deg, #ef4444 0%, #dc2626 100%)"


class EmailService:
    """
    SMTP-backed notification gateway.

    Every send method raises NotificationError when delivery fails; callers
    decide whether that aborts their operation. When no SMTP user is
    configured, messages are logged and dropped.
    """

    def __init__(self, settings: Settings):
        """
        Initialize EmailService with SMTP configuration.

        Args:
            settings: Application settings containing email configuration
        """
        self.settings = settings
        self.brand = settings.email_from_name
        self.frontend_url = settings.frontend_url.rstrip("/")

    async def send_password_reset_email(self, to: str, token: str, name: str) -> None:
        """Send the password reset link for a forgot-password request."""
        reset_url = f"{self.frontend_url}/reset-password/{token}"
        body = f"""\
      <h2>Hello {escape(name)},</h2>
      <p>We received a request to reset your password. Click the button below to reset it:</p>
      <a href="{reset_url}" class="button">Reset Password</a>
      <p>Or copy and paste this link into your browser:</p>
      <p style="word-break: break-all; color: #10b981;">{reset_url}</p>
      <p><strong>This link will expire in 1 hour.</strong></p>
      <p>If you didn't request a password reset, please ignore this email.</p>"""
        await self._send(
            to,
            f"Password Reset Request - {self.brand}",
            self._render(body, _GREEN),
        )

    async def send_approval_email(
        self,
        to: str,
        applicant_name: str,
        pet_name: str,
        reviewer_name: str,
    ) -> None:
        """Tell an applicant their adoption application was approved."""
        pet = escape(pet_name)
        body = f"""\
      <h2>Congratulations {escape(applicant_name)}!</h2>
      <div class="badge">APPLICATION APPROVED</div>
      <p>We're thrilled to inform you that your application to adopt <strong>{pet}</strong> has been approved!</p>
      <p><strong>Reviewed by:</strong> {escape(reviewer_name)}</p>
      <p><strong>Next Steps:</strong></p>
      <ol>
        <li>We will contact you within 24-48 hours with further instructions</li>
        <li>Please prepare your home for {pet}'s arrival</li>
        <li>Have all necessary supplies ready</li>
      </ol>
      <p>Thank you for choosing to adopt and giving {pet} a loving home!</p>"""
        await self._send(
            to,
            f"Your Application for {pet_name} has been Approved!",
            self._render(body, _GREEN),
        )

    async def send_rejection_email(
        self,
        to: str,
        applicant_name: str,
        pet_name: str,
        reviewer_name: str,
    ) -> None:
        """Tell an applicant their adoption application was not approved."""
        body = f"""\
      <h2>Hello {escape(applicant_name)},</h2>
      <p>Thank you for your interest in adopting <strong>{escape(pet_name)}</strong>.</p>
      <p>After careful consideration, we regret to inform you that your application has not been approved at this time.</p>
      <p><strong>Reviewed by:</strong> {escape(reviewer_name)}</p>
      <p>Please don't be discouraged - we encourage you to browse our other available pets and apply again!</p>
      <a href="{self.frontend_url}" class="button">Browse Available Pets</a>
      <p>Thank you for your understanding and continued support.</p>"""
        await self._send(
            to,
            f"Application Update for {pet_name} - {self.brand}",
            self._render(body, _RED),
        )

    def _render(self, body: str, header_colour: str) -> str:
        return _LAYOUT.format(
            brand=escape(self.brand),
            header_colour=header_colour,
            body=body,
            year=datetime.now(timezone.utc).year,
        )

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        """Build a MIME message with a plain-text fallback and an HTML part."""
        message = EmailMessage()
        message["From"] = formataddr((self.brand, self.settings.email_user))
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html, subtype="html")
        return message

    async def _send(self, to: str, subject: str, html: str) -> None:
        if not self.settings.email_enabled:
            logger.warning(f"Email delivery disabled, dropping '{subject}' for {to}")
            return

        message = self.build_message(to, subject, html)
        try:
            await run_in_threadpool(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending '{subject}' to {to}: {str(e)}")
            raise NotificationError(f"Failed to send email to {to}") from e

        logger.info(f"Email '{subject}' sent to {to}")

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.email_host, self.settings.email_port, timeout=30) as smtp:
            smtp.starttls()
            smtp.login(self.settings.email_user, self.settings.email_password)
            smtp.send_message(message)
