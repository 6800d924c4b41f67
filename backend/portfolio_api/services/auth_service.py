"""
Portfolio Backend: Shared Secrets & Session Tokens
====================================================

What:  Everything that decides whether a caller is allowed in:
       - secrets_match(): constant-time comparison of a shared secret
       - parse_bearer(): extracts the token from an Authorization header
       - AuthService: login against configured credentials, issue and
         verify signed, time-bounded tokens (HS256 via python-jose)

Sessions are stateless. A token is valid exactly when its signature checks
out against JWT_SECRET and its `exp` claim is in the future; nothing is
stored server-side.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from portfolio_api.config import Settings
from portfolio_api.exceptions import AuthError, TokenError
from portfolio_api.schemas.auth import Credentials, TokenClaims

logger = logging.getLogger(__name__)


def secrets_match(provided: str, expected: str) -> bool:
    """
    Constant-time secret comparison.

    An unset expected value never matches, so a missing configuration value
    cannot turn into "empty string is the password".
    """
    if not expected:
        return False
    # compare_digest needs equal types; bytes also handles non-ASCII secrets
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def parse_bearer(header: Optional[str]) -> str:
    """
    Return the token from an `Authorization: Bearer <token>` header.

    Raises AuthError for a missing header, another scheme, or an empty token.
    """
    if not header:
        raise AuthError(message="Missing bearer token")

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError(message="Malformed Authorization header")
    return token


class AuthService:
    """Credential check plus token issue/verify, configured from Settings."""

    def __init__(self, settings: Settings):
        self.username = settings.admin_username
        self.password = settings.admin_password
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.ttl = timedelta(minutes=settings.token_ttl_minutes)

    def login(self, credentials: Credentials) -> str:
        """
        Check the configured credential pair and issue a token.

        Raises:
            AuthError: username or password does not match (401).
            TokenError: the token could not be signed (500).
        """
        # Evaluate both comparisons so timing does not reveal which one failed
        user_ok = secrets_match(credentials.username, self.username)
        password_ok = secrets_match(credentials.password, self.password)
        if not (user_ok and password_ok):
            logger.warning("Rejected login attempt for username=%s", credentials.username)
            raise AuthError(message="Invalid credentials")

        return self.issue_token(credentials.username)

    def issue_token(self, username: str, now: Optional[datetime] = None) -> str:
        """Sign a token for `username` expiring TOKEN_TTL_MINUTES from `now`."""
        if not self.secret:
            raise TokenError(context={"reason": "JWT_SECRET is not configured"})

        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        try:
            token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
        except JWTError as e:
            logger.error("Token signing failed: %s", str(e))
            raise TokenError(context={"error_type": type(e).__name__}) from e

        logger.info("Issued session token for %s", username)
        return token

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry.

        Raises AuthError for expired, tampered or malformed tokens.
        """
        try:
            # Pinning algorithms rejects "none" and any HS/RS confusion
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise AuthError(message="Token has expired")
        except JWTError as e:
            logger.info("Rejected invalid token: %s", str(e))
            raise AuthError(message="Invalid token")

        username = payload.get("username")
        expires = payload.get("exp")
        if not username or expires is None:
            raise AuthError(message="Invalid token")

        return TokenClaims(
            username=username,
            expires_at=datetime.fromtimestamp(expires, tz=timezone.utc),
        )
