import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sportshub.cache.redis_client import invalidate_event_cache
from sportshub.core.logging import logger
from sportshub.db.repositories import (
    average_rating_for_event as db_average_rating_for_event,
    set_event_average_rating as db_set_event_average_rating,
)


class RatingAggregator:
    """
    Keeps ``Event.average_rating`` equal to the mean of the event's review ratings.

    ``recompute`` runs after the review write has committed and never raises:
    a failure is logged and the stored average stays stale until the next
    review mutation on the same event. With no reviews left the average is
    cleared to None.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def recompute(self, event_id: uuid.UUID) -> None:
        try:
            average = await db_average_rating_for_event(self.session, event_id)
            updated = await db_set_event_average_rating(self.session, event_id, average)
        except Exception:
            logger.exception(f"Failed to recompute average rating for event {event_id}")
            await self._rollback(event_id)
            return

        if not updated:
            logger.warning(f"Event {event_id} no longer exists; average rating not stored")
            return

        logger.debug(f"Average rating for event {event_id} is now {average}")
        await invalidate_event_cache()

    async def _rollback(self, event_id: uuid.UUID) -> None:
        try:
            await self.session.rollback()
        except Exception:
            logger.exception(f"Rollback after failed rating recompute for event {event_id} also failed")
