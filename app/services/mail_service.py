"""
Mail service for project invitations.

Sends through an SMTP relay. When no sender credentials are configured the
invitation is only logged (development mode) and reported as delivered.

Configuration (env vars, see app/config.py):
    SMTP_HOST, SMTP_PORT, SMTP_USE_TLS   relay
    SMTP_EMAIL, SMTP_PASSWORD            sender credentials
    MAIL_SENDER_NAME                     display name of the sender
"""
import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from app import config

logger = logging.getLogger(__name__)


INVITE_SUBJECT = 'Invitation à rejoindre le projet "{project_name}"'

INVITE_HTML = """
<p>Bonjour {name},</p>
<p>Vous êtes invité à rejoindre le projet <strong>{project_name}</strong> sur {sender_name}.</p>
<p>Cliquez sur ce lien pour rejoindre ou créer votre compte :</p>
<a href="{invite_link}" style="background:#2563eb;color:white;padding:10px 15px;border-radius:5px;text-decoration:none;">Rejoindre le projet</a>
<p>Si vous n'avez pas de compte, le lien vous permettra de vous inscrire puis d'accéder au projet.</p>
"""


class MailService:
    """Mail collaborator: delivers invitation links"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        sender_name: Optional[str] = None,
    ):
        self.host = host or config.SMTP_HOST
        self.port = port or config.SMTP_PORT
        self.username = username if username is not None else config.SMTP_EMAIL
        self.password = password if password is not None else config.SMTP_PASSWORD
        self.use_tls = config.SMTP_USE_TLS if use_tls is None else use_tls
        self.sender_name = sender_name or config.MAIL_SENDER_NAME

    def is_configured(self) -> bool:
        """Check if SMTP credentials are configured."""
        return bool(self.host and self.username and self.password)

    def render_invite(
        self,
        project_name: str,
        invite_link: str,
        to_name: Optional[str] = None,
    ) -> tuple[str, str]:
        """Return (subject, html body) of an invitation e-mail"""
        subject = INVITE_SUBJECT.format(project_name=project_name)
        body = INVITE_HTML.format(
            name=html.escape(to_name or "Utilisateur"),
            project_name=html.escape(project_name),
            sender_name=html.escape(self.sender_name),
            invite_link=html.escape(invite_link, quote=True),
        )
        return subject, body

    async def send_invite(
        self,
        to_email: str,
        project_name: str,
        invite_link: str,
        to_name: Optional[str] = None,
    ) -> bool:
        """
        Send a project invitation.

        Returns:
            True when the relay accepted the message (or in log-only mode),
            False when delivery failed. Failures are logged, never raised.
        """
        subject, body = self.render_invite(project_name, invite_link, to_name)

        if not self.is_configured():
            logger.info(
                "Invitation (dev mode): to=%s subject='%s' link=%s",
                to_email, subject, invite_link,
            )
            return True

        try:
            await asyncio.to_thread(self._send_smtp, to_email, subject, body)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Invitation e-mail failed: to=%s error=%s", to_email, exc)
            return False

        logger.info("Invitation sent: to=%s project='%s'", to_email, project_name)
        return True

    def _send_smtp(self, to_email: str, subject: str, html_body: str) -> None:
        """Actually send via SMTP."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.sender_name, self.username))
        msg["To"] = to_email
        msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            if self.use_tls:
                smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(msg)
