from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from collabdocs.core.db import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus a round trip to the database"""
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
