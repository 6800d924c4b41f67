"""
Portfolio Backend: SendGrid Mail Transport
============================================

What:  Provider-API alternative to SMTP: one HTTPS POST to SendGrid's v3
       mail/send endpoint.
How:   httpx.AsyncClient with a bounded timeout. The payload carries the
       fixed sender and recipient and sets reply_to to the submitter.

Status handling:
    202          → accepted
    401 / 403    → MailAuthError (bad or revoked API key)
    other        → TransportError with the status code in the log context
    network/timeout errors → TransportError(stage="api_call")
"""

import logging
from typing import Any, Dict, Optional

import httpx

from portfolio_api.config import Settings
from portfolio_api.exceptions import MailAuthError, TransportError
from portfolio_api.services.mail_base import MailTransport

logger = logging.getLogger(__name__)


class SendGridMailer(MailTransport):
    """
    Args:
        api_key:        SendGrid API key (sent as a bearer token).
        sender_address: Verified sender identity for the account.
        api_url:        mail/send endpoint.
        timeout:        Seconds to wait for the API call.
        transport:      Optional httpx transport (tests use httpx.MockTransport).
    """

    name = "sendgrid"

    def __init__(
        self,
        api_key: str,
        sender_address: str,
        api_url: str = "https://api.sendgrid.com/v3/mail/send",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.sender_address = sender_address
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SendGridMailer":
        return cls(
            api_key=settings.sendgrid_api_key,
            sender_address=settings.sender_address,
            api_url=settings.sendgrid_api_url,
            timeout=settings.mail_timeout,
        )

    def build_payload(
        self,
        from_display_name: str,
        submitter_email: str,
        recipient_email: str,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> Dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": recipient_email}]}],
            "from": {"email": self.sender_address, "name": from_display_name},
            "reply_to": {"email": submitter_email},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": plain_body},
                {"type": "text/html", "value": html_body},
            ],
        }

    async def send(
        self,
        from_display_name: str,
        submitter_email: str,
        recipient_email: str,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        payload = self.build_payload(
            from_display_name,
            submitter_email,
            recipient_email,
            subject,
            plain_body,
            html_body,
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logger.error("SendGrid request failed: %s", str(e))
            raise TransportError(
                stage="api_call",
                context={"error_type": type(e).__name__},
            ) from e

        if response.status_code in (401, 403):
            logger.error("SendGrid rejected the API key (HTTP %d)", response.status_code)
            raise MailAuthError(stage="api_call", context={"status": response.status_code})
        if response.status_code >= 300:
            logger.error(
                "SendGrid returned HTTP %d: %s",
                response.status_code,
                response.text[:500],
            )
            raise TransportError(stage="api_call", context={"status": response.status_code})

        logger.info(
            "Email accepted by SendGrid for %s with Reply-To %s",
            recipient_email,
            submitter_email,
        )
