import uuid
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sportshub.cache.redis_client import invalidate_event_cache
from sportshub.core.exceptions import NotFoundError
from sportshub.db.models.sport import Sport
from sportshub.db.models.user import User
from sportshub.db.query import QuerySpec, paginate, project
from sportshub.db.repositories import (
    create_sport as db_create_sport,
    delete_sport as db_delete_sport,
    get_event as db_get_event,
    get_sport as db_get_sport,
    list_sports_for_event as db_list_sports_for_event,
    update_sport as db_update_sport,
)
from sportshub.schemas import SportCreate, SportDetailOut, SportUpdate
from sportshub.services.ownership import ensure_owner_or_admin
from sportshub.validation import ensure_valid, validate_sport


class SportService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_sport(self, event_id: uuid.UUID, data: Dict[str, Any], requester: User) -> Sport:
        ev = await db_get_event(self.session, event_id)
        if not ev:
            raise NotFoundError(f"No event with the id of {event_id}")
        # Adding a sport is gated on the event owner
        ensure_owner_or_admin(ev.user_id, requester, f"add a sport to event {ev.id}")

        ensure_valid(validate_sport(data))
        values = SportCreate.model_validate(data).model_dump()

        sport = await db_create_sport(self.session, values, event_id, requester.id)
        await invalidate_event_cache()
        return sport

    async def update_sport(self, sport_id: uuid.UUID, patch: Dict[str, Any], requester: User) -> Sport:
        sport = await self._get_owned_sport(sport_id, requester, "update sport")

        ensure_valid(validate_sport(patch, partial=True))
        values = SportUpdate.model_validate(patch).model_dump(exclude_unset=True)

        sport = await db_update_sport(self.session, sport, values)
        await invalidate_event_cache()
        return sport

    async def delete_sport(self, sport_id: uuid.UUID, requester: User) -> None:
        sport = await self._get_owned_sport(sport_id, requester, "delete sport")
        await db_delete_sport(self.session, sport)
        await invalidate_event_cache()

    async def get_sport(self, sport_id: uuid.UUID) -> Sport:
        sport = await db_get_sport(self.session, sport_id, with_event=True)
        if not sport:
            raise NotFoundError(f"No sport with the id of {sport_id}")
        return sport

    async def list_event_sports(self, event_id: uuid.UUID) -> List[Sport]:
        if not await db_get_event(self.session, event_id):
            raise NotFoundError(f"No event with the id of {event_id}")
        return await db_list_sports_for_event(self.session, event_id)

    async def list_sports(self, spec: QuerySpec) -> Dict[str, Any]:
        page = await paginate(self.session, Sport, spec, options=[selectinload(Sport.event)])
        return {
            "count": len(page.items),
            "pagination": page.metadata(),
            "data": [
                project(SportDetailOut.model_validate(s).model_dump(mode="json"), spec.select)
                for s in page.items
            ],
        }

    async def _get_owned_sport(self, sport_id: uuid.UUID, requester: User, action: str) -> Sport:
        sport = await db_get_sport(self.session, sport_id)
        if not sport:
            raise NotFoundError(f"No sport with the id of {sport_id}")
        # The sport's creator, not the event owner, controls the sport
        ensure_owner_or_admin(sport.user_id, requester, f"{action} {sport.id}")
        return sport
