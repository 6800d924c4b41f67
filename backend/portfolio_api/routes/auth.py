"""
Portfolio Backend: Login & Protected Route Handlers
=====================================================

What:  POST /api/login issues a bearer token for the configured admin
       credentials; POST /api/verify checks one; /api/protected is the
       example route behind the require_bearer guard.

Tokens are stateless (see services/auth_service.py).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from portfolio_api.dependencies import get_auth_service, require_bearer
from portfolio_api.schemas.auth import Credentials, TokenClaims, TokenResponse
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.services.auth_service import AuthService

router = APIRouter(prefix="/api", tags=["Auth"])

_UNAUTHORIZED = {401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}}


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"description": "Invalid request payload", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Token signing failed", "model": ErrorResponse},
    },
    summary="Exchange admin credentials for a bearer token",
)
async def login(
    credentials: Credentials,
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return TokenResponse(token=auth.login(credentials))


@router.post(
    "/verify",
    status_code=200,
    responses=_UNAUTHORIZED,
    summary="Check a bearer token",
)
async def verify_token(claims: TokenClaims = Depends(require_bearer)) -> Response:
    return Response(status_code=200)


@router.api_route(
    "/protected",
    methods=["GET", "POST"],
    response_class=PlainTextResponse,
    responses=_UNAUTHORIZED,
    summary="Example route behind bearer-token auth",
)
async def protected(claims: TokenClaims = Depends(require_bearer)) -> PlainTextResponse:
    return PlainTextResponse("Access granted to protected route!")
