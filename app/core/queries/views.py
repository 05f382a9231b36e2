import logging
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db_objects import (
    DOCTOR_EPISODE_SUMMARY_VIEW,
    ENEMY_APPEARANCE_SUMMARY_VIEW,
)
from app.core.errors import DatabaseError, ObjectNotProvisionedError

logger = logging.getLogger(__name__)

# How PostgreSQL and SQLite report a missing relation
MISSING_OBJECT_MARKERS = ("does not exist", "no such table")


def _is_missing_object(error: DBAPIError) -> bool:
    message = str(error.orig if error.orig is not None else error).lower()
    return any(marker in message for marker in MISSING_OBJECT_MARKERS)


async def _select_view(view_name: str, db: AsyncSession) -> List[Dict[str, Any]]:
    try:
        result = await db.execute(text(f"SELECT * FROM {view_name}"))
        return [dict(row._mapping) for row in result]
    except DBAPIError as error:
        # A failed statement leaves the PostgreSQL transaction aborted
        await db.rollback()
        if _is_missing_object(error):
            logger.error(f"View {view_name} is not provisioned: {error.orig}")
            raise ObjectNotProvisionedError("VIEW", view_name)
        logger.error(f"Failed to query view {view_name}: {error}")
        raise DatabaseError(f"Failed to query {view_name}")


async def query_doctor_episode_summary(db: AsyncSession) -> List[Dict[str, Any]]:
    """
    Per-doctor totals: distinct episodes, companions and enemies, plus the
    first and last air date among the doctor's episodes.
    """
    return await _select_view(DOCTOR_EPISODE_SUMMARY_VIEW, db)


async def query_enemy_appearance_summary(db: AsyncSession) -> List[Dict[str, Any]]:
    """Per-enemy episode count and the ", "-joined episode titles by air date."""
    return await _select_view(ENEMY_APPEARANCE_SUMMARY_VIEW, db)
