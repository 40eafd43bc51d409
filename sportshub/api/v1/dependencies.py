from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sportshub.db.query import QuerySpec
from sportshub.db.session import get_session
from sportshub.geo.resolver import GeoResolver, get_geo_resolver
from sportshub.services.event_service import EventService
from sportshub.services.rating_aggregator import RatingAggregator
from sportshub.services.review_service import ReviewService
from sportshub.services.sport_service import SportService


def get_query_spec(request: Request) -> QuerySpec:
    return QuerySpec.from_params(request.query_params.multi_items())


def get_event_service(
    session: AsyncSession = Depends(get_session),
    geo_resolver: GeoResolver = Depends(get_geo_resolver),
) -> EventService:
    return EventService(session, geo_resolver)


def get_sport_service(session: AsyncSession = Depends(get_session)) -> SportService:
    return SportService(session)


def get_review_service(session: AsyncSession = Depends(get_session)) -> ReviewService:
    return ReviewService(session, RatingAggregator(session))
