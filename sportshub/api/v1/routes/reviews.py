from fastapi import APIRouter, Body, Depends, status
from sportshub.schemas import DataResponse, ListResponse, PaginatedResponse, ReviewDetailOut, ReviewOut
from sportshub.api.v1.dependencies import get_query_spec, get_review_service
from sportshub.services.review_service import ReviewService
from sportshub.auth import role_required
from sportshub.db.query import QuerySpec
from typing import Any, Dict
from uuid import UUID

router = APIRouter(tags=["reviews"])


@router.get("/reviews", response_model=PaginatedResponse)
async def get_reviews(
    spec: QuerySpec = Depends(get_query_spec),
    review_service: ReviewService = Depends(get_review_service)
):
    return PaginatedResponse(**await review_service.list_reviews(spec))


@router.get("/events/{event_id}/reviews", response_model=ListResponse[ReviewOut])
async def get_event_reviews(
    event_id: UUID,
    review_service: ReviewService = Depends(get_review_service)
):
    reviews = await review_service.list_event_reviews(event_id)
    return ListResponse(count=len(reviews), data=[ReviewOut.model_validate(r) for r in reviews])


@router.post(
    "/events/{event_id}/reviews",
    response_model=DataResponse[ReviewOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_review(
    event_id: UUID,
    payload: Dict[str, Any] = Body(...),
    user=Depends(role_required("user")),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.create_review(event_id, payload, user)
    return DataResponse(data=ReviewOut.model_validate(review))


@router.get("/reviews/{review_id}", response_model=DataResponse[ReviewDetailOut])
async def get_review(
    review_id: UUID,
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.get_review(review_id)
    return DataResponse(data=ReviewDetailOut.model_validate(review))


@router.put("/reviews/{review_id}", response_model=DataResponse[ReviewOut])
async def update_review(
    review_id: UUID,
    payload: Dict[str, Any] = Body(...),
    user=Depends(role_required("user")),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.update_review(review_id, payload, user)
    return DataResponse(data=ReviewOut.model_validate(review))


@router.delete("/reviews/{review_id}", response_model=DataResponse[Dict[str, Any]])
async def delete_review(
    review_id: UUID,
    user=Depends(role_required("user")),
    review_service: ReviewService = Depends(get_review_service)
):
    await review_service.delete_review(review_id, user)
    return DataResponse(data={})
