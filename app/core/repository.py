import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core import models
from app.core.errors import ConflictError, DatabaseError, NotFoundError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENTITY ACCESS LAYER
# One repository implementation, configured per entity by a descriptor.
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class EntityDescriptor:
    """
    Everything the repository needs to know about one entity type.

    Args:
        model: Mapped class
        name: Display name used in error messages ("Doctor not found")
        load_options: Eager loads applied to every read
        order_by: Default ordering for get_all
    """

    model: type
    name: str
    load_options: Sequence[Any] = ()
    order_by: Sequence[Any] = ()

    @property
    def primary_key(self):
        return inspect(self.model).primary_key[0]


def _is_unique_violation(error: IntegrityError) -> bool:
    text = str(error.orig).lower()
    return "unique" in text or "duplicate" in text


class EntityRepository:
    def __init__(self, db: AsyncSession, descriptor: EntityDescriptor):
        self.db = db
        self.descriptor = descriptor

    @property
    def model(self):
        return self.descriptor.model

    @property
    def name(self) -> str:
        return self.descriptor.name

    async def get_all(
        self,
        *criteria,
        options: Optional[Iterable[Any]] = None,
        order_by: Optional[Iterable[Any]] = None,
    ) -> List[Any]:
        """Return every row, optionally filtered, with related rows attached."""
        load_options = self.descriptor.load_options if options is None else options
        ordering = self.descriptor.order_by if order_by is None else order_by

        query = select(self.model).options(*load_options).where(*criteria)
        if ordering:
            query = query.order_by(*ordering)
        else:
            query = query.order_by(self.descriptor.primary_key)

        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as error:
            logger.error(f"Failed to fetch {self.name} records: {error}")
            raise DatabaseError(f"Failed to fetch {self.name} records")

    async def get_by_id(self, record_id: int, options: Optional[Iterable[Any]] = None):
        load_options = self.descriptor.load_options if options is None else options
        query = (
            select(self.model)
            .options(*load_options)
            .where(self.descriptor.primary_key == record_id)
            # Re-read columns even when the row already sits in the identity map
            .execution_options(populate_existing=True)
        )

        try:
            result = await self.db.execute(query)
            record = result.scalars().first()
        except SQLAlchemyError as error:
            logger.error(f"Failed to fetch {self.name} {record_id}: {error}")
            raise DatabaseError(f"Failed to fetch {self.name}")

        if record is None:
            raise NotFoundError(self.name)
        return record

    async def create(self, data: Dict[str, Any]):
        record = self.model(**data)
        self.db.add(record)
        await self._commit("create")

        record_id = inspect(record).identity[0]
        return await self.get_by_id(record_id)

    async def create_many(self, rows: Iterable[Dict[str, Any]]) -> List[Any]:
        """Bulk insert; returns the new rows with generated keys populated."""
        records = [self.model(**row) for row in rows]
        self.db.add_all(records)
        await self._commit("create")
        return records

    async def update(self, record_id: int, data: Dict[str, Any]):
        record = await self.get_by_id(record_id, options=())

        for key, value in data.items():
            setattr(record, key, value)

        await self._commit("update")
        return await self.get_by_id(record_id)

    async def delete(self, record_id: int) -> None:
        record = await self.get_by_id(record_id, options=())
        await self.db.delete(record)
        await self._commit("delete")

    async def count(self, *criteria) -> int:
        query = select(func.count()).select_from(self.model).where(*criteria)
        try:
            result = await self.db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as error:
            logger.error(f"Failed to count {self.name} records: {error}")
            raise DatabaseError(f"Failed to count {self.name} records")

    async def exists(self, *criteria) -> bool:
        return await self.count(*criteria) > 0

    async def _commit(self, verb: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as error:
            await self.db.rollback()
            if _is_unique_violation(error):
                logger.warning(f"Duplicate {self.name} rejected: {error.orig}")
                raise ConflictError("A record with this value already exists")
            logger.error(f"Failed to {verb} {self.name}: {error}")
            raise DatabaseError(f"Failed to {verb} {self.name}")
        except SQLAlchemyError as error:
            await self.db.rollback()
            logger.error(f"Failed to {verb} {self.name}: {error}")
            raise DatabaseError(f"Failed to {verb} {self.name}")


# =========================
# Entity descriptors
# =========================
DOCTORS = EntityDescriptor(
    model=models.Doctor,
    name="Doctor",
    load_options=(
        selectinload(models.Doctor.actor),
        selectinload(models.Doctor.first_episode),
        selectinload(models.Doctor.last_episode),
    ),
    order_by=(models.Doctor.incarnation_number,),
)

EPISODES = EntityDescriptor(
    model=models.Episode,
    name="Episode",
    load_options=(
        selectinload(models.Episode.season),
        selectinload(models.Episode.writer),
        selectinload(models.Episode.director),
    ),
    order_by=(models.Episode.air_date, models.Episode.episode_id),
)

ENEMIES = EntityDescriptor(
    model=models.Enemy,
    name="Enemy",
    load_options=(
        selectinload(models.Enemy.species),
        selectinload(models.Enemy.home_planet),
    ),
)

ACTORS = EntityDescriptor(model=models.Actor, name="Actor")
WRITERS = EntityDescriptor(model=models.Writer, name="Writer")
DIRECTORS = EntityDescriptor(model=models.Director, name="Director")
PLANETS = EntityDescriptor(model=models.Planet, name="Planet")
SPECIES = EntityDescriptor(model=models.Species, name="Species")
SEASONS = EntityDescriptor(model=models.Season, name="Season")
COMPANIONS = EntityDescriptor(model=models.Companion, name="Companion")
CHARACTERS = EntityDescriptor(model=models.Character, name="Character")
TARDISES = EntityDescriptor(model=models.Tardis, name="Tardis")
DOCTOR_COMPANIONS = EntityDescriptor(model=models.DoctorCompanion, name="DoctorCompanion")
EPISODE_APPEARANCES = EntityDescriptor(
    model=models.EpisodeAppearance, name="EpisodeAppearance"
)
EPISODE_LOCATIONS = EntityDescriptor(
    model=models.EpisodeLocation, name="EpisodeLocation"
)
ENEMY_EPISODES = EntityDescriptor(model=models.EnemyEpisode, name="EnemyEpisode")
