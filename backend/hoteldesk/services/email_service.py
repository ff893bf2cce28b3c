"""
E-mail delivery over SMTP
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from hoteldesk.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """SMTP mailer"""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        sender_email: Optional[str] = None,
        use_tls: Optional[bool] = None,
    ):
        self.smtp_host = smtp_host or settings.SMTP_HOST
        self.smtp_port = smtp_port or settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER if smtp_user is None else smtp_user
        self.smtp_password = settings.SMTP_PASSWORD if smtp_password is None else smtp_password
        self.sender_email = sender_email or settings.SMTP_SENDER or self.smtp_user
        self.use_tls = settings.SMTP_USE_TLS if use_tls is None else use_tls

    def send(self, recipient: str, subject: str, html: str) -> bool:
        """Send an HTML message; False when delivery failed"""
        msg = MIMEMultipart()
        msg["From"] = self.sender_email
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Failed to send email to {recipient}: {e}")
            return False

        logger.info(f"Email sent to {recipient}: {subject}")
        return True
