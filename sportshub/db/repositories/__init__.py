"""
Repository layer for database operations.

Async functions for Event, Sport and Review persistence. Unique-constraint
violations are translated into ``DuplicateConstraintError``; everything else
propagates unchanged.
"""
from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sportshub.core.exceptions import DuplicateConstraintError
from sportshub.db.models.user import User
from sportshub.db.models.event import Event
from sportshub.db.models.sport import Sport
from sportshub.db.models.review import Review
from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid

# (markers found in the driver error, message) per unique constraint.
# PostgreSQL reports the constraint name, SQLite the constrained columns.
EVENT_NAME_CONFLICT = (("events_name_key", "events.name"), "An event with that name already exists")
EVENT_OWNER_CONFLICT = (
    ("events_exclusive_owner_id_key", "events.exclusive_owner_id"),
    "The user has already published an event",
)
REVIEW_CONFLICT = (
    ("uq_review_event_user", "reviews.event_id, reviews.user_id"),
    "The user has already reviewed this event",
)


async def _commit(db: AsyncSession, conflicts: Sequence[Tuple[Tuple[str, ...], str]] = ()) -> None:
    """Commit, mapping known unique violations to ``DuplicateConstraintError``."""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        detail = str(e.orig).lower()
        for markers, message in conflicts:
            if any(marker in detail for marker in markers):
                raise DuplicateConstraintError(message)
        if "unique" in detail or "duplicate key" in detail:
            raise DuplicateConstraintError("Duplicate field value entered")
        raise


async def get_user(db: AsyncSession, user_id) -> Optional[User]:
    q = select(User).where(User.id == user_id)
    res = await db.execute(q)
    return res.scalars().first()


# Events

async def get_event(db: AsyncSession, event_id: uuid.UUID, with_sports: bool = False) -> Optional[Event]:
    q = select(Event).where(Event.id == event_id)
    if with_sports:
        q = q.options(selectinload(Event.sports))
    res = await db.execute(q)
    return res.scalars().first()


async def get_event_by_owner(db: AsyncSession, user_id: uuid.UUID) -> Optional[Event]:
    q = select(Event).where(Event.user_id == user_id).limit(1)
    res = await db.execute(q)
    return res.scalars().first()


async def create_event(db: AsyncSession, values: Dict[str, Any], owner: User) -> Event:
    """
    Insert an event.

    Args:
        db: Database session
        values: Column values, including the geocoded point and slug
        owner: Publishing user; non-admins also claim ``exclusive_owner_id``

    Returns:
        Created Event object
    """
    ev = Event(
        **values,
        user_id=owner.id,
        exclusive_owner_id=None if owner.is_admin else owner.id,
    )
    db.add(ev)
    await _commit(db, (EVENT_NAME_CONFLICT, EVENT_OWNER_CONFLICT))
    await db.refresh(ev)
    return ev


async def update_event(db: AsyncSession, ev: Event, values: Dict[str, Any]) -> Event:
    for key, value in values.items():
        setattr(ev, key, value)
    await _commit(db, (EVENT_NAME_CONFLICT,))
    await db.refresh(ev)
    return ev


async def delete_event(db: AsyncSession, ev: Event) -> None:
    """Delete an event together with its sports and reviews."""
    await db.execute(delete(Sport).where(Sport.event_id == ev.id))
    await db.execute(delete(Review).where(Review.event_id == ev.id))
    await db.execute(delete(Event).where(Event.id == ev.id))
    await db.commit()


async def list_events_in_latitude_band(db: AsyncSession, min_lat: float, max_lat: float) -> List[Event]:
    q = select(Event).where(Event.latitude >= min_lat, Event.latitude <= max_lat)
    res = await db.execute(q)
    return list(res.scalars().all())


async def average_rating_for_event(db: AsyncSession, event_id: uuid.UUID) -> Optional[float]:
    """Mean review rating for an event, or None when it has no reviews."""
    q = select(func.avg(Review.rating)).where(Review.event_id == event_id)
    res = await db.execute(q)
    value = res.scalar()
    return float(value) if value is not None else None


async def set_event_average_rating(db: AsyncSession, event_id: uuid.UUID, value: Optional[float]) -> bool:
    """Write the aggregate; returns False when the event does not exist."""
    res = await db.execute(
        update(Event).where(Event.id == event_id).values(average_rating=value)
    )
    await db.commit()
    return res.rowcount > 0


# Sports

async def get_sport(db: AsyncSession, sport_id: uuid.UUID, with_event: bool = False) -> Optional[Sport]:
    q = select(Sport).where(Sport.id == sport_id)
    if with_event:
        q = q.options(selectinload(Sport.event))
    res = await db.execute(q)
    return res.scalars().first()


async def list_sports_for_event(db: AsyncSession, event_id: uuid.UUID) -> List[Sport]:
    q = select(Sport).where(Sport.event_id == event_id).order_by(Sport.created_at)
    res = await db.execute(q)
    return list(res.scalars().all())


async def create_sport(db: AsyncSession, values: Dict[str, Any], event_id: uuid.UUID, user_id: uuid.UUID) -> Sport:
    sport = Sport(**values, event_id=event_id, user_id=user_id)
    db.add(sport)
    await _commit(db)
    await db.refresh(sport)
    return sport


async def update_sport(db: AsyncSession, sport: Sport, values: Dict[str, Any]) -> Sport:
    for key, value in values.items():
        setattr(sport, key, value)
    await _commit(db)
    await db.refresh(sport)
    return sport


async def delete_sport(db: AsyncSession, sport: Sport) -> None:
    await db.delete(sport)
    await db.commit()


# Reviews

async def get_review(db: AsyncSession, review_id: uuid.UUID, with_event: bool = False) -> Optional[Review]:
    q = select(Review).where(Review.id == review_id)
    if with_event:
        q = q.options(selectinload(Review.event))
    res = await db.execute(q)
    return res.scalars().first()


async def list_reviews_for_event(db: AsyncSession, event_id: uuid.UUID) -> List[Review]:
    q = select(Review).where(Review.event_id == event_id).order_by(Review.created_at.desc())
    res = await db.execute(q)
    return list(res.scalars().all())


async def create_review(db: AsyncSession, values: Dict[str, Any], event_id: uuid.UUID, user_id: uuid.UUID) -> Review:
    review = Review(**values, event_id=event_id, user_id=user_id)
    db.add(review)
    await _commit(db, (REVIEW_CONFLICT,))
    await db.refresh(review)
    return review


async def update_review(db: AsyncSession, review: Review, values: Dict[str, Any]) -> Review:
    for key, value in values.items():
        setattr(review, key, value)
    await _commit(db)
    await db.refresh(review)
    return review


async def delete_review(db: AsyncSession, review: Review) -> None:
    await db.delete(review)
    await db.commit()
