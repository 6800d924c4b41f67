"""
Portfolio Backend: Review Schemas
===================================

What:  API contracts for GET /api/reviews and POST /api/review.
Why:   FastAPI validates the submission body against ReviewSubmission before
       the handler runs, so a malformed or incomplete body never reaches the
       gateway (it becomes a 400 via the RequestValidationError handler).

The `key` field is optional at the schema level: an absent secret is an
authorization failure (401), not a decoding failure (400).
"""

from pydantic import BaseModel, Field


class ReviewOut(BaseModel):
    """One review as returned to the frontend. Every field is populated."""

    id: int = Field(description="Store-assigned identifier")
    company: str = Field(description="Reviewer's company")
    name: str = Field(description="Reviewer's name")
    review: str = Field(description="Review text")

    model_config = {"from_attributes": True}


class ReviewSubmission(BaseModel):
    """Body of POST /api/review."""

    company: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    review: str = Field(min_length=1)
    key: str = Field(default="", description="Shared secret gating review submission")
