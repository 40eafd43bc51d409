from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr
from typing import Any, Dict, Generic, List, Optional, TypeVar
from typing_extensions import Annotated
from uuid import UUID
from datetime import datetime

from sportshub.db.models.sport import SportLevel

T = TypeVar("T")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


StrippedStr = Annotated[str, BeforeValidator(_strip)]


# Input schemas. Constraint checks live in sportshub.validation; these only
# coerce an already validated mapping into typed values.

class EventCreate(BaseModel):
    name: StrippedStr
    description: StrippedStr
    date: datetime
    address: StrippedStr
    phone: Optional[StrippedStr] = None
    email: Optional[EmailStr] = None


class EventUpdate(BaseModel):
    name: Optional[StrippedStr] = None
    description: Optional[StrippedStr] = None
    date: Optional[datetime] = None
    address: Optional[StrippedStr] = None
    phone: Optional[StrippedStr] = None
    email: Optional[EmailStr] = None


class SportCreate(BaseModel):
    title: StrippedStr
    description: StrippedStr
    rules: StrippedStr
    cost: Optional[float] = None
    level: SportLevel = SportLevel.all


class SportUpdate(BaseModel):
    title: Optional[StrippedStr] = None
    description: Optional[StrippedStr] = None
    rules: Optional[StrippedStr] = None
    cost: Optional[float] = None
    level: Optional[SportLevel] = None


class ReviewCreate(BaseModel):
    title: StrippedStr
    comment: StrippedStr
    rating: int


class ReviewUpdate(BaseModel):
    title: Optional[StrippedStr] = None
    comment: Optional[StrippedStr] = None
    rating: Optional[int] = None


# Output schemas

class GeoLocationOut(BaseModel):
    type: str = "Point"
    coordinates: List[float]
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class EventSummary(BaseModel):
    id: UUID
    name: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class SportOut(BaseModel):
    id: UUID
    title: str
    description: str
    rules: str
    cost: Optional[float]
    level: SportLevel
    event_id: UUID
    user_id: UUID
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SportDetailOut(SportOut):
    event: Optional[EventSummary] = None


class EventOut(BaseModel):
    id: UUID
    name: str
    slug: str
    description: str
    date: datetime
    location: GeoLocationOut
    phone: Optional[str]
    email: Optional[str]
    photo: str
    average_rating: Optional[float]
    user_id: UUID
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EventDetailOut(EventOut):
    sports: List[SportOut] = []


class ReviewOut(BaseModel):
    id: UUID
    title: str
    comment: str
    rating: int
    event_id: UUID
    user_id: UUID
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewDetailOut(ReviewOut):
    event: Optional[EventSummary] = None


# Response envelopes

class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ListResponse(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: List[T]


class PaginationMetadata(BaseModel):
    total: int
    page: int
    per_page: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginatedResponse(BaseModel):
    success: bool = True
    count: int
    pagination: PaginationMetadata
    data: List[Dict[str, Any]]
