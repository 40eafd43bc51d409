from fastapi import APIRouter, Body, Depends, File, Path, UploadFile, status
from sportshub.schemas import DataResponse, EventDetailOut, EventOut, ListResponse, PaginatedResponse
from sportshub.api.v1.dependencies import get_event_service, get_query_spec
from sportshub.services.event_service import EventService
from sportshub.auth import role_required
from sportshub.db.query import QuerySpec
from typing import Any, Dict, Optional
from uuid import UUID

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=PaginatedResponse)
async def get_events(
    spec: QuerySpec = Depends(get_query_spec),
    event_service: EventService = Depends(get_event_service)
):
    """
    List events.

    Supports ``select``, ``sort``, ``page``, ``limit`` and column filters
    such as ``city=Boston`` or ``average_rating[gte]=7``.
    """
    result = await event_service.list_events(spec)
    return PaginatedResponse(**result)


@router.post("", response_model=DataResponse[EventOut], status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: Dict[str, Any] = Body(...),
    user=Depends(role_required("publisher")),
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.create_event(payload, user)
    return DataResponse(data=EventOut.model_validate(ev))


@router.get("/radius/{zipcode}/{distance}", response_model=ListResponse[EventOut])
async def get_events_in_radius(
    zipcode: str,
    distance: float = Path(..., description="Radius in miles"),
    event_service: EventService = Depends(get_event_service)
):
    """Events within ``distance`` miles of the center of ``zipcode``."""
    events = await event_service.find_within_radius(zipcode, distance)
    return ListResponse(count=len(events), data=[EventOut.model_validate(ev) for ev in events])


@router.get("/{event_id}", response_model=DataResponse[EventDetailOut])
async def get_event_detail(
    event_id: UUID,
    event_service: EventService = Depends(get_event_service)
):
    return DataResponse(data=await event_service.get_event(event_id))


@router.put("/{event_id}", response_model=DataResponse[EventOut])
async def update_event_endpoint(
    event_id: UUID,
    payload: Dict[str, Any] = Body(...),
    user=Depends(role_required("publisher")),
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.update_event(event_id, payload, user)
    return DataResponse(data=EventOut.model_validate(ev))


@router.delete("/{event_id}", response_model=DataResponse[Dict[str, Any]])
async def delete_event_endpoint(
    event_id: UUID,
    user=Depends(role_required("publisher")),
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(event_id, user)
    return DataResponse(data={})


@router.put("/{event_id}/photo", response_model=DataResponse[str])
async def upload_event_photo(
    event_id: UUID,
    file: Optional[UploadFile] = File(None),
    user=Depends(role_required("publisher")),
    event_service: EventService = Depends(get_event_service)
):
    filename = await event_service.upload_photo(event_id, file, user)
    return DataResponse(data=filename)
