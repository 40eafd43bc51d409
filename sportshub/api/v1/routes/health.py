from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from sportshub.db.session import get_session
from sportshub.core.logging import logger
from typing import Dict

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=Dict[str, str])
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    Liveness check including a database round trip.

    Returns:
        Dict with the service status and database status
    """
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning(f"Health check database ping failed: {e}")
        database = "unavailable"
    return {"status": "healthy", "database": database}
