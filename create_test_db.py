"""
Create the PostgreSQL test database and its tables.

The test suite runs against SQLite by default; run this first when pointing
TEST_DATABASE_URL at PostgreSQL.
"""
import asyncio
import os
import sys

import asyncpg

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from sportshub.core.logging import logger
from sportshub.db.session import Database

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = int(os.getenv("DB_PORT", "5432"))
DB_NAME = os.getenv("TEST_DB_NAME", "sportshub_test")


async def create_database() -> None:
    """Create the test database if it doesn't exist."""
    conn = await asyncpg.connect(
        user=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database="postgres",
    )
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", DB_NAME)
        if exists:
            logger.info(f"Database '{DB_NAME}' already exists")
            return
        await conn.execute(f'CREATE DATABASE "{DB_NAME}"')
        logger.info(f"Database '{DB_NAME}' created")
    finally:
        await conn.close()


async def create_tables() -> None:
    database = Database(f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}")
    database.init()
    try:
        await database.create_all()
        logger.info("Tables created")
    finally:
        await database.dispose()


async def main() -> int:
    try:
        await create_database()
        await create_tables()
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Test database setup failed: {e}")
        return 1

    logger.info(
        f"Test database ready; run pytest with "
        f"TEST_DATABASE_URL=postgresql+asyncpg://{DB_USER}:***@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
