"""
Portfolio Backend: Mail Transport Selection
=============================================

Picks the MailTransport implementation named by MAIL_TRANSPORT.
"""

from portfolio_api.config import Settings
from portfolio_api.services.mail_base import MailTransport
from portfolio_api.services.sendgrid_mailer import SendGridMailer
from portfolio_api.services.smtp_mailer import SMTPMailer


def build_mailer(settings: Settings) -> MailTransport:
    """Return the configured transport. Nothing connects until send()."""
    if settings.mail_transport == "sendgrid":
        return SendGridMailer.from_settings(settings)
    return SMTPMailer.from_settings(settings)
