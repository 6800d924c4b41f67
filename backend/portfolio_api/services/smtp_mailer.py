"""
Portfolio Backend: SMTP Mail Transport
========================================

What:  Direct submission of contact-form mail to an SMTP relay.
How:   aiosmtplib, driven one command at a time:

    connect ──▶ STARTTLS ──▶ AUTH ──▶ MAIL FROM ──▶ RCPT TO ──▶ DATA ──▶ QUIT

    Each arrow is a separate failure point. The first failure aborts the
    session with a TransportError whose context names the stage. The
    connection is closed on every exit path, success included.

Retries:
    Only the connect stage may be retried (MAIL_CONNECT_ATTEMPTS, default 1,
    i.e. no retry). Nothing has been sent at that point, so a retry can never
    produce a duplicate email. Later stages are never retried.

QUIT:
    Once DATA has been accepted the relay owns the message. A failing QUIT
    after that point is logged and ignored; the send is reported as success.
"""

import asyncio
import logging
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Awaitable, TypeVar

import aiosmtplib
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from portfolio_api.config import Settings
from portfolio_api.exceptions import MailAuthError, TransportError
from portfolio_api.services.mail_base import MailTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_message(
    sender_name: str,
    sender_address: str,
    reply_to: str,
    recipient: str,
    subject: str,
    plain_body: str,
    html_body: str,
) -> EmailMessage:
    """
    Build an RFC 5322 multipart/alternative message.

    From and To are the fixed administrative identities; Reply-To is the
    submitter.
    """
    domain = sender_address.partition("@")[2] or None

    message = EmailMessage()
    message["From"] = formataddr((sender_name, sender_address))
    message["To"] = recipient
    message["Reply-To"] = reply_to
    message["Subject"] = subject
    message["Date"] = formatdate(localtime=True)
    message["Message-ID"] = make_msgid(domain=domain)
    message.set_content(plain_body)
    message.add_alternative(html_body, subtype="html")
    return message


class SMTPMailer(MailTransport):
    """
    STARTTLS + AUTH PLAIN/LOGIN submission to a mail relay.

    Args:
        host, port:       Relay address (typically port 587).
        username:         Account used for AUTH and as envelope sender.
        password:         Account password.
        sender_address:   Visible From address (defaults to username).
        timeout:          Per-command timeout and overall submission bound.
        connect_attempts: Connect-stage attempts (1 = no retry).
    """

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender_address: str = "",
        timeout: float = 10.0,
        connect_attempts: int = 1,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_address = sender_address or username
        self.timeout = timeout
        self.connect_attempts = connect_attempts

    @classmethod
    def from_settings(cls, settings: Settings) -> "SMTPMailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            sender_address=settings.sender_address,
            timeout=settings.mail_timeout,
            connect_attempts=settings.mail_connect_attempts,
        )

    async def send(
        self,
        from_display_name: str,
        submitter_email: str,
        recipient_email: str,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        message = build_message(
            sender_name=from_display_name,
            sender_address=self.sender_address,
            reply_to=submitter_email,
            recipient=recipient_email,
            subject=subject,
            plain_body=plain_body,
            html_body=html_body,
        )

        logger.info("Connecting to SMTP relay %s:%d", self.host, self.port)
        try:
            await asyncio.wait_for(
                self._submit(message, recipient_email),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error("SMTP submission timed out after %.0fs", self.timeout)
            raise TransportError(stage="timeout", context={"host": self.host})

        logger.info(
            "Email sent to %s with Reply-To %s",
            recipient_email,
            submitter_email,
        )

    async def _submit(self, message: EmailMessage, recipient: str) -> None:
        smtp = await self._connect()
        try:
            await self._step("starttls", smtp.starttls())
            await self._step("auth", smtp.login(self.username, self.password))
            # Envelope sender is the authenticated account; relays reject a
            # MAIL FROM the account does not own. The visible From header
            # may still differ (MAIL_FROM_ADDRESS).
            await self._step("mail_from", smtp.mail(self.username))
            await self._step("rcpt_to", smtp.rcpt(recipient))
            await self._step("data", smtp.data(message.as_bytes()))

            try:
                await smtp.quit()
            except (aiosmtplib.SMTPException, OSError) as e:
                logger.warning("SMTP QUIT failed after message was accepted: %s", str(e))
        finally:
            if smtp.is_connected:
                smtp.close()

    async def _connect(self) -> aiosmtplib.SMTP:
        """Open the TCP session (plaintext; STARTTLS follows as its own step)."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.connect_attempts),
            wait=wait_exponential_jitter(initial=1, max=5, jitter=1),
            retry=retry_if_exception_type(TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                smtp = aiosmtplib.SMTP(
                    hostname=self.host,
                    port=self.port,
                    timeout=self.timeout,
                    start_tls=False,
                )
                await self._step("connect", smtp.connect())
        return smtp

    async def _step(self, stage: str, command: Awaitable[T]) -> T:
        """Await one SMTP command, translating failures into TransportError."""
        try:
            return await command
        except aiosmtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication rejected: %s", e.message)
            raise MailAuthError(
                message="Failed to send message",
                stage=stage,
                context={"host": self.host, "code": e.code},
            ) from e
        except aiosmtplib.SMTPException as e:
            logger.error("SMTP %s failed: %s", stage, str(e))
            raise TransportError(
                stage=stage,
                context={"host": self.host, "error_type": type(e).__name__},
            ) from e
        except OSError as e:
            logger.error("SMTP %s failed at socket level: %s", stage, str(e))
            raise TransportError(
                stage=stage,
                context={"host": self.host, "error_type": type(e).__name__},
            ) from e
