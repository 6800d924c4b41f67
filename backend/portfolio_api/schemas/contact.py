"""
Portfolio Backend: Contact Form Schema
========================================

What:  Body of POST /api/contact.

A ContactMessage lives for one request only. It is handed to the
ContactService, turned into an email and discarded; nothing is persisted.
"""

from pydantic import BaseModel, EmailStr, Field


class ContactMessage(BaseModel):
    """Transient contact-form submission."""

    name: str = Field(min_length=1, max_length=255)
    # Becomes the Reply-To header of the relayed email
    email: EmailStr
    message: str = Field(min_length=1, max_length=10_000)
    key: str = Field(default="", description="Only checked when CONTACT_FORM_KEY is set")
