"""
Portfolio Backend: Shared Response Schemas
============================================

What:  Error envelope used by every global exception handler, and the
       health check payload.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body.

    Example:
        {
            "error": "unauthorized",
            "message": "Unauthorized",
            "request_id": "3f2a9c1e"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""

    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    mail_transport: str = Field(description="Configured transport: smtp or sendgrid")
    uptime_seconds: float
