"""
Unit tests for the Database lifecycle handle.
"""
import pytest
from sqlalchemy import text

from sportshub.db.session import Database


@pytest.mark.unit
@pytest.mark.asyncio
class TestDatabase:
    async def test_lifecycle(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'lifecycle.db'}")
        database.init()
        await database.create_all()

        async for session in database.session():
            result = await session.execute(text("SELECT count(*) FROM events"))
            assert result.scalar() == 0

        await database.dispose()
        assert database.engine is None

    async def test_session_before_init(self):
        database = Database("sqlite+aiosqlite:///:memory:")

        with pytest.raises(RuntimeError):
            async for _ in database.session():
                pass

    async def test_init_is_idempotent(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'twice.db'}")
        database.init()
        engine = database.engine
        database.init()

        assert database.engine is engine
        await database.dispose()
