"""
Unit tests for repository functions and their unique-constraint mapping.
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy import func, select

from sportshub.core.exceptions import DuplicateConstraintError
from sportshub.db.models import Event
from sportshub.db.repositories import create_event, get_event, update_event
from conftest import BEVERLY_HILLS, KNOWN_ADDRESSES


def event_values(name, point=BEVERLY_HILLS):
    values = point.model_dump()
    values.update(
        name=name,
        slug=name.lower().replace(" ", "-"),
        description=f"Description for {name}",
        date=datetime.utcnow() + timedelta(days=3),
    )
    return values


async def count_events(db_session):
    res = await db_session.execute(select(func.count()).select_from(Event))
    return res.scalar()


@pytest.mark.unit
@pytest.mark.asyncio
class TestEventRepository:
    async def test_create_event_claims_exclusive_owner(self, db_session, test_publisher):
        ev = await create_event(db_session, event_values("Morning Runs"), test_publisher)

        assert ev.user_id == test_publisher.id
        assert ev.exclusive_owner_id == test_publisher.id

    async def test_second_event_for_same_publisher_hits_unique_owner(self, db_session, test_publisher):
        # Both inserts bypass the service-level lookup
        await create_event(db_session, event_values("Morning Runs"), test_publisher)

        with pytest.raises(DuplicateConstraintError, match="already published an event"):
            await create_event(db_session, event_values("Evening Runs"), test_publisher)

        assert await count_events(db_session) == 1

    async def test_admin_events_leave_exclusive_owner_empty(self, db_session, test_admin):
        first = await create_event(db_session, event_values("Morning Runs"), test_admin)
        second = await create_event(db_session, event_values("Evening Runs"), test_admin)

        assert first.exclusive_owner_id is None
        assert second.exclusive_owner_id is None
        assert await count_events(db_session) == 2

    async def test_duplicate_name_on_create(self, db_session, test_admin):
        await create_event(db_session, event_values("Morning Runs"), test_admin)

        with pytest.raises(DuplicateConstraintError, match="name already exists"):
            await create_event(db_session, event_values("Morning Runs"), test_admin)

    async def test_duplicate_name_on_update(self, db_session, test_event, test_admin):
        pier = await create_event(
            db_session,
            event_values("Pier Run", KNOWN_ADDRESSES["Santa Monica Pier, Santa Monica, CA"]),
            test_admin,
        )
        pier_id = pier.id

        with pytest.raises(DuplicateConstraintError, match="name already exists"):
            await update_event(db_session, pier, {"name": test_event.name})

        reloaded = await get_event(db_session, pier_id)
        assert reloaded.name == "Pier Run"
