"""
Portfolio Backend: Review Route Handlers
==========================================

What:  GET /api/reviews (list) and POST /api/review (submit).
Who:   Called by the frontend DataDisplay and ReviewForm components.

Error responses come from the global handlers in main.py:
    400 malformed/incomplete body (RequestValidationError → DecodeError)
    401 wrong or absent shared secret (AuthError)
    500 store failure (StorageError)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from portfolio_api.dependencies import get_review_service
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.review import ReviewOut, ReviewSubmission
from portfolio_api.services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reviews"])


@router.get(
    "/reviews",
    response_model=List[ReviewOut],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all reviews",
)
async def list_reviews(
    reviews: ReviewService = Depends(get_review_service),
) -> List[ReviewOut]:
    return await reviews.list_reviews()


@router.post(
    "/review",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Review stored", "content": {"text/plain": {}}},
        400: {"description": "Invalid request payload", "model": ErrorResponse},
        401: {"description": "Wrong or missing shared secret", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Submit a review (requires the shared secret)",
)
async def submit_review(
    submission: ReviewSubmission,
    reviews: ReviewService = Depends(get_review_service),
) -> PlainTextResponse:
    """
    Store one review.

    The body is validated by FastAPI before this runs; the shared secret is
    checked by ReviewService before the gateway is touched.
    """
    await reviews.submit_review(submission)
    return PlainTextResponse("Review submitted successfully")
