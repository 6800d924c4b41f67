"""
Portfolio Backend: Contact Relay Service
==========================================

What:  Turns a contact-form submission into one email to the site owner.
Why:   The form's sender is a stranger; the mail is sent from our own
       administrative identity to ADMIN_EMAIL, with Reply-To set to the
       stranger, so it passes SPF/DMARC and replies still reach them.
How:   Checks the optional shared secret, checks that an admin recipient is
       configured, formats plain and HTML bodies, hands them to the
       configured MailTransport.

Access policy:
    CONTACT_FORM_KEY unset → the form is open to anyone.
    CONTACT_FORM_KEY set   → the body's "key" must match it (401 otherwise).
"""

import html
import logging

from portfolio_api.exceptions import AuthError, ConfigError
from portfolio_api.schemas.contact import ContactMessage
from portfolio_api.services.auth_service import secrets_match
from portfolio_api.services.mail_base import MailTransport

logger = logging.getLogger(__name__)

CONTACT_SUBJECT = "New Contact Form Submission"


def render_bodies(contact: ContactMessage) -> tuple[str, str]:
    """Plain-text and HTML bodies. User text is escaped in the HTML part."""
    plain = f"Name: {contact.name}\nEmail: {contact.email}\nMessage: {contact.message}"
    safe_message = html.escape(contact.message).replace("\n", "<br>")
    rich = (
        f"<p>Name: {html.escape(contact.name)}</p>"
        f"<p>Email: {html.escape(contact.email)}</p>"
        f"<p>Message: {safe_message}</p>"
    )
    return plain, rich


class ContactService:

    def __init__(
        self,
        mailer: MailTransport,
        admin_email: str,
        contact_form_key: str = "",
        from_display_name: str = "Portfolio Contact Form",
    ):
        self.mailer = mailer
        self.admin_email = admin_email
        self.contact_form_key = contact_form_key
        self.from_display_name = from_display_name

    async def relay(self, contact: ContactMessage) -> None:
        """
        Send the message or raise. There is no silent drop.

        Raises:
            AuthError: CONTACT_FORM_KEY is set and the key does not match.
            ConfigError: ADMIN_EMAIL is not configured.
            TransportError: the mail transport failed.
        """
        if self.contact_form_key and not secrets_match(contact.key, self.contact_form_key):
            logger.warning("Contact message rejected: bad shared secret")
            raise AuthError(message="Unauthorized")

        if not self.admin_email:
            logger.error("ADMIN_EMAIL is not set; cannot relay contact message")
            raise ConfigError(
                message="Email server misconfiguration",
                context={"missing": ["ADMIN_EMAIL"]},
            )

        plain, rich = render_bodies(contact)
        await self.mailer.send(
            from_display_name=self.from_display_name,
            submitter_email=contact.email,
            recipient_email=self.admin_email,
            subject=CONTACT_SUBJECT,
            plain_body=plain,
            html_body=rich,
        )
