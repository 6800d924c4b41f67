"""
Portfolio Backend: Abstract Mail Transport Interface
======================================================

What:  The one capability every outbound-mail implementation provides.
Why:   The contact handler and its tests depend only on send(). Which
       transport actually runs (direct SMTP submission or the SendGrid API)
       is chosen by configuration in services.mailer.build_mailer().
How:   Concrete transports subclass MailTransport and implement send().

Contract (every implementation):
    - The visible sender and the envelope recipient are fixed administrative
      identities, so the mail passes the sending domain's SPF/DMARC checks.
    - Reply-To is always the end-user submitter, so replying from the inbox
      goes straight to the person who filled in the form.
    - The whole submission is bounded by a timeout.
    - Any failure raises TransportError (MailAuthError for rejected
      credentials). Returning normally means the message was accepted.
"""

from abc import ABC, abstractmethod


class MailTransport(ABC):
    """Sends one formatted message to an administrative recipient."""

    # Short identifier reported by the health check
    name: str = "abstract"

    @abstractmethod
    async def send(
        self,
        from_display_name: str,
        submitter_email: str,
        recipient_email: str,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        """
        Deliver one message.

        Args:
            from_display_name: Display name shown next to the fixed sender address.
            submitter_email:   Address of the person who submitted the form (Reply-To).
            recipient_email:   Administrative inbox receiving the message.
            subject:           Subject line.
            plain_body:        text/plain part.
            html_body:         text/html part.

        Raises:
            TransportError: relay/provider unreachable, TLS failure, rejected
                envelope or data, timeout.
            MailAuthError: credentials rejected.
        """
        ...
