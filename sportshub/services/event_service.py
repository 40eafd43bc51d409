import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from slugify import slugify
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from starlette.concurrency import run_in_threadpool

from sportshub.cache.cache_decorators import cached
from sportshub.cache.redis_client import invalidate_event_cache
from sportshub.core.config import settings
from sportshub.core.exceptions import (
    AppError,
    DuplicateConstraintError,
    FieldError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from sportshub.core.logging import logger
from sportshub.db.models.event import Event
from sportshub.db.models.user import User
from sportshub.db.query import QuerySpec, paginate, project
from sportshub.db.repositories import (
    create_event as db_create_event,
    delete_event as db_delete_event,
    get_event as db_get_event,
    get_event_by_owner as db_get_event_by_owner,
    list_events_in_latitude_band as db_list_events_in_latitude_band,
    update_event as db_update_event,
)
from sportshub.geo.resolver import GeoResolver
from sportshub.geo.spherical import latitude_band, miles_to_radians, within_spherical_cap
from sportshub.schemas import EventCreate, EventDetailOut, EventUpdate
from sportshub.services.ownership import ensure_owner_or_admin
from sportshub.validation import ensure_valid, validate_event


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


class EventService:
    """
    Event persistence with geocoding and ownership rules.

    Addresses are geocoded before anything is written and are never stored;
    only the resolved point is. Non-admin users may publish one event.
    """

    def __init__(self, session: AsyncSession, geo_resolver: GeoResolver, upload_dir: Optional[str] = None):
        self.session = session
        self.geo_resolver = geo_resolver
        self.upload_dir = Path(upload_dir or settings.FILE_UPLOAD_PATH)

    async def create_event(self, data: Dict[str, Any], requester: User) -> Event:
        ensure_valid(validate_event(data))
        payload = EventCreate.model_validate(data)

        if not requester.is_admin:
            published = await db_get_event_by_owner(self.session, requester.id)
            if published:
                raise DuplicateConstraintError(
                    f"The user with ID {requester.id} has already published an event"
                )

        point = await self.geo_resolver.resolve(payload.address)

        values = payload.model_dump(exclude={"address"})
        values.update(point.model_dump())
        values["slug"] = slugify(payload.name)

        ev = await db_create_event(self.session, values, requester)
        logger.info(f"Event {ev.id} created by user {requester.id}")
        await invalidate_event_cache()
        return ev

    async def update_event(self, event_id: uuid.UUID, patch: Dict[str, Any], requester: User) -> Event:
        ev = await self._get_owned_event(event_id, requester, "update this event")

        ensure_valid(validate_event(patch, partial=True))
        values = EventUpdate.model_validate(patch).model_dump(exclude_unset=True)

        address = values.pop("address", None)
        if address is not None:
            point = await self.geo_resolver.resolve(address)
            values.update(point.model_dump())
        if "name" in values:
            values["slug"] = slugify(values["name"])

        ev = await db_update_event(self.session, ev, values)
        logger.info(f"Event {ev.id} updated by user {requester.id}")
        await invalidate_event_cache()
        return ev

    async def delete_event(self, event_id: uuid.UUID, requester: User) -> None:
        ev = await self._get_owned_event(event_id, requester, "delete this event")
        await db_delete_event(self.session, ev)
        logger.info(f"Event {event_id} and its sports and reviews deleted by user {requester.id}")
        await invalidate_event_cache()

    @cached('events:detail')
    async def get_event(self, event_id: uuid.UUID) -> Dict[str, Any]:
        """Event with its sports, serialized for the cache."""
        ev = await db_get_event(self.session, event_id, with_sports=True)
        if not ev:
            raise NotFoundError(f"Event not found with id of {event_id}")
        return EventDetailOut.model_validate(ev).model_dump(mode="json")

    @cached('events:list')
    async def list_events(self, spec: QuerySpec) -> Dict[str, Any]:
        page = await paginate(self.session, Event, spec, options=[selectinload(Event.sports)])
        return {
            "count": len(page.items),
            "pagination": page.metadata(),
            "data": [
                project(EventDetailOut.model_validate(ev).model_dump(mode="json"), spec.select)
                for ev in page.items
            ],
        }

    async def find_within_radius(self, zipcode: str, distance_miles: float) -> List[Event]:
        """
        Events whose point lies within ``distance_miles`` of the zipcode's center.

        Containment is tested on the sphere, so caps crossing a pole or the
        antimeridian are handled without special cases.
        """
        try:
            radius = miles_to_radians(distance_miles)
        except ValueError as e:
            raise ValidationError([FieldError(field="distance", message=str(e))])

        center = await self.geo_resolver.resolve(zipcode)
        min_lat, max_lat = latitude_band(center.latitude, radius)
        candidates = await db_list_events_in_latitude_band(self.session, min_lat, max_lat)

        origin = (center.longitude, center.latitude)
        return [
            ev for ev in candidates
            if within_spherical_cap(origin, (ev.longitude, ev.latitude), radius)
        ]

    async def upload_photo(self, event_id: uuid.UUID, upload: Optional[UploadFile], requester: User) -> str:
        ev = await self._get_owned_event(event_id, requester, "update this event")

        if upload is None or not upload.filename:
            raise UploadError("Please upload a file")
        if not (upload.content_type or "").startswith("image"):
            raise UploadError("Please upload an image file")

        content = await upload.read()
        if len(content) > settings.MAX_FILE_UPLOAD:
            raise UploadError(f"Please upload an image less than {settings.MAX_FILE_UPLOAD} bytes")

        filename = f"photo_{ev.id}{Path(upload.filename).suffix}"
        try:
            await run_in_threadpool(_write_file, self.upload_dir / filename, content)
        except OSError:
            logger.exception(f"Could not store photo for event {ev.id}")
            raise AppError("Problem with file upload", 500)

        await db_update_event(self.session, ev, {"photo": filename})
        await invalidate_event_cache()
        return filename

    async def _get_owned_event(self, event_id: uuid.UUID, requester: User, action: str) -> Event:
        ev = await db_get_event(self.session, event_id)
        if not ev:
            raise NotFoundError(f"Event not found with id of {event_id}")
        ensure_owner_or_admin(ev.user_id, requester, action)
        return ev
