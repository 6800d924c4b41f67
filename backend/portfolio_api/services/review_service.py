"""
Portfolio Backend: Review Service
===================================

What:  Business rules for reviews: anyone may read them; writing requires
       the shared secret configured as REVIEW_FORM_KEY.
Who:   Called by routes/reviews.py; calls PersistenceGateway.

The secret check happens before the gateway is touched, so a rejected
submission never reaches the store.
"""

import logging
from typing import List

from portfolio_api.exceptions import AuthError
from portfolio_api.schemas.review import ReviewOut, ReviewSubmission
from portfolio_api.services.auth_service import secrets_match
from portfolio_api.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self, gateway: PersistenceGateway, review_form_key: str):
        self.gateway = gateway
        self.review_form_key = review_form_key

    async def list_reviews(self) -> List[ReviewOut]:
        return await self.gateway.list_reviews()

    async def submit_review(self, submission: ReviewSubmission) -> None:
        """
        Raises:
            AuthError: key absent or wrong (401), nothing inserted.
            StorageError: insert failed (500).
        """
        if not secrets_match(submission.key, self.review_form_key):
            logger.warning("Review rejected: bad shared secret (company=%s)", submission.company)
            raise AuthError(message="Unauthorized")

        await self.gateway.insert_review(submission)
