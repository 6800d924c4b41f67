"""
Portfolio Backend: Contact Route Handler
==========================================

What:  POST /api/contact relays a contact-form message to the site owner.
How:   FastAPI validates the body (400 on bad JSON, missing fields or an
       invalid email address); ContactService checks policy and config and
       dispatches through the configured MailTransport.

Failures:
    401 shared secret required and wrong (only when CONTACT_FORM_KEY is set)
    500 ADMIN_EMAIL missing (ConfigError) or mail transport failure
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from portfolio_api.dependencies import get_contact_service
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.contact import ContactMessage
from portfolio_api.services.contact_service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post(
    "/contact",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Message relayed", "content": {"text/plain": {}}},
        400: {"description": "Invalid request payload", "model": ErrorResponse},
        401: {"description": "Wrong shared secret", "model": ErrorResponse},
        500: {"description": "Misconfiguration or mail failure", "model": ErrorResponse},
    },
    summary="Send a contact-form message to the site owner",
)
async def submit_contact(
    contact: ContactMessage,
    service: ContactService = Depends(get_contact_service),
) -> PlainTextResponse:
    logger.info("Contact message received from %s", contact.email)
    await service.relay(contact)
    return PlainTextResponse("Message sent successfully")
