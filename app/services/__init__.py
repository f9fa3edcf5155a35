"""Services module"""

from app.services.mail_service import MailService

__all__ = ["MailService"]
