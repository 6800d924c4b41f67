"""
Portfolio Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, one per failure class the API reports.
Why:   Services raise these; global handlers registered in main.py turn them
       into an HTTP status plus a short JSON body. Route handlers never build
       error responses themselves.
How:   Each exception carries a user-safe message and a context dict. The
       context is logged server-side and never returned to the client.

Exception Hierarchy:
    PortfolioError (base)            → 500
    ├── DecodeError                  → 400 Bad Request (malformed/incomplete body)
    ├── AuthError                    → 401 Unauthorized (secret or token rejected)
    ├── MethodError                  → 405 Method Not Allowed
    ├── ConfigError                  → 500 (fatal when raised at startup)
    ├── StorageError                 → 500 (query or connection failure)
    ├── TransportError               → 500 (mail relay / provider failure)
    │   └── MailAuthError            → 500 (relay rejected our credentials)
    └── TokenError                   → 500 (token could not be signed)
"""

from typing import Any, Dict, Optional


class PortfolioError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DecodeError(PortfolioError):
    """
    Raised when a request body is not valid JSON or lacks a required field.

    HTTP: 400 Bad Request. Raised before any store or mail call is made.
    """

    status_code = 400
    error_code = "invalid_payload"

    def __init__(
        self,
        message: str = "Invalid request payload",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthError(PortfolioError):
    """
    Raised when a shared secret does not match, or a bearer token is
    missing, malformed, badly signed or expired.

    HTTP: 401 Unauthorized, with a WWW-Authenticate header.
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MethodError(PortfolioError):
    """HTTP verb not supported on a known route (405)."""

    status_code = 405
    error_code = "method_not_allowed"

    def __init__(
        self,
        method: str = "",
        path: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"method": method, "path": path})
        super().__init__(message="Method not allowed", context=ctx)


class ConfigError(PortfolioError):
    """
    Raised when a required configuration value is absent.

    At startup this aborts the lifespan, so the server never accepts traffic
    with a broken configuration. Per request (admin recipient missing) it
    becomes a 500 with a generic message.
    """

    error_code = "server_misconfigured"

    def __init__(
        self,
        message: str = "Server misconfiguration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(PortfolioError):
    """
    Raised when a database query or connection fails.

    The message returned to the client is always generic. The SQL error and
    the operation name are logged server-side only.
    """

    error_code = "storage_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransportError(PortfolioError):
    """
    Raised when the mail transport fails to deliver a message.

    context["stage"] names the step that failed (connect, starttls, auth,
    mail_from, rcpt_to, data, api_call) so a failed send can be diagnosed
    from the log line alone.
    """

    error_code = "mail_delivery_failed"

    def __init__(
        self,
        message: str = "Failed to send message",
        stage: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if stage:
            ctx["stage"] = stage
        super().__init__(message=message, context=ctx)
        self.stage = stage


class MailAuthError(TransportError):
    """The mail relay or provider rejected our credentials."""


class TokenError(PortfolioError):
    """Raised when a session token cannot be signed."""

    error_code = "token_error"

    def __init__(
        self,
        message: str = "Could not issue a session token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
