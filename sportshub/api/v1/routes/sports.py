from fastapi import APIRouter, Body, Depends
from sportshub.schemas import DataResponse, ListResponse, PaginatedResponse, SportDetailOut, SportOut
from sportshub.api.v1.dependencies import get_query_spec, get_sport_service
from sportshub.services.sport_service import SportService
from sportshub.auth import role_required
from sportshub.db.query import QuerySpec
from typing import Any, Dict
from uuid import UUID

router = APIRouter(tags=["sports"])


@router.get("/sports", response_model=PaginatedResponse)
async def get_sports(
    spec: QuerySpec = Depends(get_query_spec),
    sport_service: SportService = Depends(get_sport_service)
):
    return PaginatedResponse(**await sport_service.list_sports(spec))


@router.get("/events/{event_id}/sports", response_model=ListResponse[SportOut])
async def get_event_sports(
    event_id: UUID,
    sport_service: SportService = Depends(get_sport_service)
):
    sports = await sport_service.list_event_sports(event_id)
    return ListResponse(count=len(sports), data=[SportOut.model_validate(s) for s in sports])


@router.post("/events/{event_id}/sports", response_model=DataResponse[SportOut])
async def add_sport(
    event_id: UUID,
    payload: Dict[str, Any] = Body(...),
    user=Depends(role_required("publisher")),
    sport_service: SportService = Depends(get_sport_service)
):
    sport = await sport_service.create_sport(event_id, payload, user)
    return DataResponse(data=SportOut.model_validate(sport))


@router.get("/sports/{sport_id}", response_model=DataResponse[SportDetailOut])
async def get_sport(
    sport_id: UUID,
    sport_service: SportService = Depends(get_sport_service)
):
    sport = await sport_service.get_sport(sport_id)
    return DataResponse(data=SportDetailOut.model_validate(sport))


@router.put("/sports/{sport_id}", response_model=DataResponse[SportOut])
async def update_sport(
    sport_id: UUID,
    payload: Dict[str, Any] = Body(...),
    user=Depends(role_required("publisher")),
    sport_service: SportService = Depends(get_sport_service)
):
    sport = await sport_service.update_sport(sport_id, payload, user)
    return DataResponse(data=SportOut.model_validate(sport))


@router.delete("/sports/{sport_id}", response_model=DataResponse[Dict[str, Any]])
async def delete_sport(
    sport_id: UUID,
    user=Depends(role_required("publisher")),
    sport_service: SportService = Depends(get_sport_service)
):
    await sport_service.delete_sport(sport_id, user)
    return DataResponse(data={})
