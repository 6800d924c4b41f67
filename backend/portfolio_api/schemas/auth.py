"""
Portfolio Backend: Auth Schemas
=================================

What:  Login request/response and the decoded token claims.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Body of POST /api/login."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Returned by a successful login."""

    token: str = Field(description="Signed, time-bounded bearer token")


class TokenClaims(BaseModel):
    """What a verified token carries. No server-side session exists."""

    username: str
    expires_at: datetime
