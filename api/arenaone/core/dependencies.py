"""FastAPI dependencies for injection into route handlers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from arenaone.core.database import get_db
from arenaone.repositories import AvailabilityRepository, SqlRepository


async def get_repository(db: AsyncSession = Depends(get_db)) -> AvailabilityRepository:
    """The repository route handlers read from. Tests override this with InMemoryRepository."""
    return SqlRepository(db)
