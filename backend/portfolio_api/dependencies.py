"""
Portfolio Backend: FastAPI Dependencies
=========================================

What:  Accessors that hand the components built by create_app() to routes.
Why:   The gateway, mailer and services are constructed once at wiring time
       and stored on app.state. Routes declare what they need with Depends()
       and never reach for module-level singletons or the environment, so
       tests can build an app around fakes.
"""

from fastapi import Depends, Request

from portfolio_api.schemas.auth import TokenClaims
from portfolio_api.services.auth_service import AuthService, parse_bearer
from portfolio_api.services.contact_service import ContactService
from portfolio_api.services.gateway import PersistenceGateway
from portfolio_api.services.mail_base import MailTransport
from portfolio_api.services.review_service import ReviewService


def get_gateway(request: Request) -> PersistenceGateway:
    return request.app.state.gateway


def get_mailer(request: Request) -> MailTransport:
    return request.app.state.mailer


def get_review_service(request: Request) -> ReviewService:
    return request.app.state.review_service


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def require_bearer(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """
    Guard for protected routes.

    Reads `Authorization: Bearer <token>`, verifies signature and expiry.
    Any problem raises AuthError, which the global handler turns into 401.
    """
    token = parse_bearer(request.headers.get("Authorization"))
    return auth.verify(token)
