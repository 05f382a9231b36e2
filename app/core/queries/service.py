import logging
from typing import Any, Awaitable, Dict, List, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DatabaseError, NotFoundError
from app.core.queries import joins, procedures, views

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryService:
    """Join, view, procedure and update queries bound to one request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _run(self, operation: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except SQLAlchemyError as error:
            await self.db.rollback()
            logger.error(f"{operation} failed: {error}")
            raise DatabaseError(f"Failed to {operation}")

    async def get_doctor_full_details(self, doctor_id: int) -> Dict[str, Any]:
        result = await self._run(
            "fetch doctor details", joins.get_doctor_full_details(doctor_id, self.db)
        )
        if result is None:
            raise NotFoundError("Doctor")
        return result

    async def get_episode_with_all_details(self, episode_id: int) -> Dict[str, Any]:
        result = await self._run(
            "fetch episode details",
            joins.get_episode_with_all_details(episode_id, self.db),
        )
        if result is None:
            raise NotFoundError("Episode")
        return result

    async def doctor_episode_summary(self) -> List[Dict[str, Any]]:
        return await views.query_doctor_episode_summary(self.db)

    async def enemy_appearance_summary(self) -> List[Dict[str, Any]]:
        return await views.query_enemy_appearance_summary(self.db)

    async def get_enemies_by_threat_level(self, min_threat_level: int):
        return await self._run(
            "fetch enemies by threat level",
            procedures.get_enemies_by_threat_level(min_threat_level, self.db),
        )

    async def get_episodes_for_doctor(self, incarnation_number: int):
        return await self._run(
            "fetch episodes for doctor",
            procedures.get_episodes_for_doctor(incarnation_number, self.db),
        )

    async def update_enemy_threat_level(self, enemy_id: int, threat_level: Any):
        return await self._run(
            "update enemy threat level",
            procedures.update_enemy_threat_level(enemy_id, threat_level, self.db),
        )
