import uuid
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from sportshub.cache.redis_client import invalidate_event_cache
from sportshub.core.exceptions import NotFoundError
from sportshub.core.logging import logger
from sportshub.db.models.review import Review
from sportshub.db.models.user import User
from sportshub.db.query import QuerySpec, paginate, project
from sportshub.db.repositories import (
    create_review as db_create_review,
    delete_review as db_delete_review,
    get_event as db_get_event,
    get_review as db_get_review,
    list_reviews_for_event as db_list_reviews_for_event,
    update_review as db_update_review,
)
from sportshub.schemas import ReviewCreate, ReviewOut, ReviewUpdate
from sportshub.services.ownership import ensure_owner_or_admin
from sportshub.services.rating_aggregator import RatingAggregator
from sportshub.validation import ensure_valid, validate_review


class ReviewService:
    """
    Review persistence. Every committed create, delete or rating change is
    followed by a recompute of the event's average rating.
    """

    def __init__(self, session: AsyncSession, aggregator: RatingAggregator):
        self.session = session
        self.aggregator = aggregator

    async def create_review(self, event_id: uuid.UUID, data: Dict[str, Any], requester: User) -> Review:
        ev = await db_get_event(self.session, event_id)
        if not ev:
            raise NotFoundError(f"No event with the id of {event_id}")

        ensure_valid(validate_review(data))
        values = ReviewCreate.model_validate(data).model_dump()

        # Uniqueness of (event, user) is enforced by uq_review_event_user
        review = await db_create_review(self.session, values, event_id, requester.id)
        logger.info(f"Review {review.id} added to event {event_id} by user {requester.id}")

        await self.aggregator.recompute(event_id)
        return review

    async def update_review(self, review_id: uuid.UUID, patch: Dict[str, Any], requester: User) -> Review:
        review = await self._get_owned_review(review_id, requester, "update this review")

        ensure_valid(validate_review(patch, partial=True))
        values = ReviewUpdate.model_validate(patch).model_dump(exclude_unset=True)
        previous_rating = review.rating

        review = await db_update_review(self.session, review, values)
        if review.rating != previous_rating:
            await self.aggregator.recompute(review.event_id)
        else:
            await invalidate_event_cache()
        return review

    async def delete_review(self, review_id: uuid.UUID, requester: User) -> None:
        review = await self._get_owned_review(review_id, requester, "delete this review")
        event_id = review.event_id

        await db_delete_review(self.session, review)
        logger.info(f"Review {review_id} deleted by user {requester.id}")

        await self.aggregator.recompute(event_id)

    async def get_review(self, review_id: uuid.UUID) -> Review:
        review = await db_get_review(self.session, review_id, with_event=True)
        if not review:
            raise NotFoundError(f"No review found with the id of {review_id}")
        return review

    async def list_event_reviews(self, event_id: uuid.UUID) -> List[Review]:
        if not await db_get_event(self.session, event_id):
            raise NotFoundError(f"No event with the id of {event_id}")
        return await db_list_reviews_for_event(self.session, event_id)

    async def list_reviews(self, spec: QuerySpec) -> Dict[str, Any]:
        page = await paginate(self.session, Review, spec)
        return {
            "count": len(page.items),
            "pagination": page.metadata(),
            "data": [
                project(ReviewOut.model_validate(r).model_dump(mode="json"), spec.select)
                for r in page.items
            ],
        }

    async def _get_owned_review(self, review_id: uuid.UUID, requester: User, action: str) -> Review:
        review = await db_get_review(self.session, review_id)
        if not review:
            raise NotFoundError(f"No review with the id of {review_id}")
        ensure_owner_or_admin(review.user_id, requester, action)
        return review
