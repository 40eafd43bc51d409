from typing import AsyncGenerator, Optional
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sportshub.core.logging import logger

Base = declarative_base()


class Database:
    """
    Persistence handle owning the async engine and session factory.

    Created once per process; ``init`` and ``dispose`` are called from the
    application's startup and shutdown hooks and the handle is published on
    ``app.state.database`` for request-scoped sessions.
    """

    def __init__(self, url: str, **engine_options):
        self.url = url
        self.engine_options = engine_options
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    def init(self) -> None:
        if self.engine is not None:
            return
        options = dict(self.engine_options)
        if self.url.startswith("sqlite"):
            options.setdefault("poolclass", NullPool)
        else:
            # Pooling configuration for server databases
            options.setdefault("pool_size", 20)
            options.setdefault("max_overflow", 10)
            options.setdefault("pool_pre_ping", True)
            options.setdefault("pool_recycle", 3600)
        self.engine = create_async_engine(self.url, echo=False, **options)
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        logger.info("Database engine initialised")

    async def create_all(self) -> None:
        # Import models so they register on Base.metadata
        from sportshub.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self.session_factory = None

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        if self.session_factory is None:
            raise RuntimeError("Database.init() must be called before opening sessions")
        async with self.session_factory() as session:
            yield session


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async for session in request.app.state.database.session():
        yield session
