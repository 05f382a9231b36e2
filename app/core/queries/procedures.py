from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models
from app.core.errors import BadRequestError, NotFoundError
from app.core.models import THREAT_LEVEL_MAX, THREAT_LEVEL_MIN


# -----------------------------------------------------------------------------
# PROCEDURAL QUERIES
# Parameterized query builders for the reports the API exposes as "procedures".
# -----------------------------------------------------------------------------

THREAT_LEVEL_MESSAGE = (
    f"Threat level must be between {THREAT_LEVEL_MIN} and {THREAT_LEVEL_MAX}"
)


def parse_threat_level(value: Any) -> int:
    """
    Accept an integer (or integer string) in the allowed range.

    Raises:
        BadRequestError: for anything else, including booleans and fractions
    """
    if isinstance(value, bool) or value is None:
        raise BadRequestError(THREAT_LEVEL_MESSAGE)
    if isinstance(value, float) and not value.is_integer():
        raise BadRequestError(THREAT_LEVEL_MESSAGE)

    try:
        level = int(value)
    except (TypeError, ValueError):
        raise BadRequestError(THREAT_LEVEL_MESSAGE)

    if level < THREAT_LEVEL_MIN or level > THREAT_LEVEL_MAX:
        raise BadRequestError(THREAT_LEVEL_MESSAGE)
    return level


async def get_enemies_by_threat_level(
    min_threat_level: int, db: AsyncSession
) -> List[Dict[str, Any]]:
    """
    Enemies at or above a threat level, most dangerous first.

    Example:
        [{"enemy_id": 1, "name": "Dalek", "threat_level": 10,
          "species_name": "Dalek", "home_planet": "Skaro", "episode_appearances": 3}]
    """
    query = (
        select(
            models.Enemy.enemy_id,
            models.Enemy.name,
            models.Enemy.threat_level,
            models.Species.name.label("species_name"),
            models.Planet.name.label("home_planet"),
            func.count(models.EnemyEpisode.episode_id.distinct()).label(
                "episode_appearances"
            ),
        )
        .select_from(models.Enemy)
        .outerjoin(models.Species, models.Enemy.species_id == models.Species.species_id)
        .outerjoin(models.Planet, models.Enemy.home_planet_id == models.Planet.planet_id)
        .outerjoin(
            models.EnemyEpisode, models.Enemy.enemy_id == models.EnemyEpisode.enemy_id
        )
        .where(models.Enemy.threat_level >= min_threat_level)
        .group_by(
            models.Enemy.enemy_id,
            models.Enemy.name,
            models.Enemy.threat_level,
            models.Species.name,
            models.Planet.name,
        )
        .order_by(desc(models.Enemy.threat_level), models.Enemy.enemy_id)
    )

    result = await db.execute(query)
    return [dict(row._mapping) for row in result.all()]


def _join_names(names: List[str]) -> Optional[str]:
    # Mirrors GROUP_CONCAT: NULL when nothing matched
    return ", ".join(names) if names else None


async def get_episodes_for_doctor(
    incarnation_number: int, db: AsyncSession
) -> List[Dict[str, Any]]:
    """
    Episodes reachable from a Doctor's companion stints (start or end episode),
    ordered by air date.

    Each row carries season/writer/director names, the companions whose stint
    starts in that episode and the enemies appearing in it.
    Unknown incarnation numbers yield an empty list.
    """
    link = models.DoctorCompanion

    doctor_ids = select(models.Doctor.doctor_id).where(
        models.Doctor.incarnation_number == incarnation_number
    )
    linked_episode_ids = (
        select(models.Episode.episode_id)
        .join(
            link,
            or_(
                models.Episode.episode_id == link.start_episode_id,
                models.Episode.episode_id == link.end_episode_id,
            ),
        )
        .where(link.doctor_id.in_(doctor_ids))
    )

    episode_query = (
        select(
            models.Episode.episode_id,
            models.Episode.title,
            models.Episode.air_date,
            models.Episode.runtime_minutes,
            models.Season.series_number,
            models.Season.year.label("season_year"),
            models.Writer.name.label("writer_name"),
            models.Director.name.label("director_name"),
        )
        .select_from(models.Episode)
        .outerjoin(models.Season, models.Episode.season_id == models.Season.season_id)
        .outerjoin(models.Writer, models.Episode.writer_id == models.Writer.writer_id)
        .outerjoin(
            models.Director, models.Episode.director_id == models.Director.director_id
        )
        .where(models.Episode.episode_id.in_(linked_episode_ids))
        .order_by(models.Episode.air_date, models.Episode.episode_id)
    )
    episode_rows = (await db.execute(episode_query)).all()
    if not episode_rows:
        return []

    episode_ids = [row.episode_id for row in episode_rows]

    companion_query = (
        select(link.start_episode_id.label("episode_id"), models.Companion.name)
        .select_from(link)
        .join(models.Companion, link.companion_id == models.Companion.companion_id)
        .where(link.doctor_id.in_(doctor_ids), link.start_episode_id.in_(episode_ids))
        .distinct()
        .order_by(link.start_episode_id, models.Companion.name)
    )
    companion_rows = (await db.execute(companion_query)).all()

    enemy_query = (
        select(models.EnemyEpisode.episode_id, models.Enemy.name)
        .select_from(models.EnemyEpisode)
        .join(models.Enemy, models.EnemyEpisode.enemy_id == models.Enemy.enemy_id)
        .where(models.EnemyEpisode.episode_id.in_(episode_ids))
        .distinct()
        .order_by(models.EnemyEpisode.episode_id, models.Enemy.name)
    )
    enemy_rows = (await db.execute(enemy_query)).all()

    episodes = []
    for row in episode_rows:
        entry = dict(row._mapping)
        entry["companions"] = _join_names(
            [c.name for c in companion_rows if c.episode_id == row.episode_id]
        )
        entry["enemies"] = _join_names(
            [e.name for e in enemy_rows if e.episode_id == row.episode_id]
        )
        episodes.append(entry)

    return episodes


async def update_enemy_threat_level(
    enemy_id: int, new_threat_level: Any, db: AsyncSession
) -> Dict[str, Any]:
    """
    Set an enemy's threat level and return it with species and planet names.

    The update and the re-read are separate statements; concurrent updates
    resolve as last writer wins.

    Raises:
        BadRequestError: threat level outside 1..10 or not an integer
        NotFoundError: no enemy with that id
    """
    level = parse_threat_level(new_threat_level)

    result = await db.execute(
        update(models.Enemy)
        .where(models.Enemy.enemy_id == enemy_id)
        .values(threat_level=level)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise NotFoundError("Enemy")
    await db.commit()

    query = (
        select(
            models.Enemy.enemy_id,
            models.Enemy.name,
            models.Enemy.threat_level,
            models.Species.name.label("species_name"),
            models.Planet.name.label("home_planet"),
        )
        .select_from(models.Enemy)
        .outerjoin(models.Species, models.Enemy.species_id == models.Species.species_id)
        .outerjoin(models.Planet, models.Enemy.home_planet_id == models.Planet.planet_id)
        .where(models.Enemy.enemy_id == enemy_id)
    )
    row = (await db.execute(query)).first()
    if row is None:
        raise NotFoundError("Enemy")
    return dict(row._mapping)
