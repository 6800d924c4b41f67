"""
Portfolio Backend: Health Check Route
=======================================

What:  GET /health for uptime monitors and container health checks.
How:   Pings the store through the gateway (SELECT 1, bounded by
       DB_QUERY_TIMEOUT) and reports the configured mail transport.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503)

The mail transport is reported by name only; no SMTP session or provider
call is made.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio_api import __version__
from portfolio_api.dependencies import get_gateway, get_mailer
from portfolio_api.exceptions import StorageError
from portfolio_api.schemas.common import HealthResponse
from portfolio_api.services.gateway import PersistenceGateway
from portfolio_api.services.mail_base import MailTransport

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    gateway: PersistenceGateway = Depends(get_gateway),
    mailer: MailTransport = Depends(get_mailer),
) -> JSONResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await gateway.ping()
    except StorageError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e.context)

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        mail_transport=mailer.name,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=body.model_dump(),
    )
