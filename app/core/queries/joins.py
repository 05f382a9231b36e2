from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core import models, schemas


# -----------------------------------------------------------------------------
# JOIN QUERIES
# Purpose: rebuild denormalized "with full context" shapes from normalized tables.
# -----------------------------------------------------------------------------


async def get_doctor_full_details(
    doctor_id: int, db: AsyncSession
) -> Optional[Dict[str, Any]]:
    """
    Assemble a Doctor together with every companion and companion-linked episode.

    Episodes enter the result only as start/end episodes of the doctor's
    companion stints; the doctor's own first/last episode is not merged in.

    Args:
        doctor_id: Doctor primary key
        db: Database session

    Returns:
        None when the doctor does not exist, otherwise the doctor's fields plus
        "companions" and "episodes" lists.

    Example:
        {
            "doctor_id": 1, "incarnation_number": 10, ...,
            "companions": [{"companion_id": 1, "name": "Rose Tyler",
                            "start_episode_id": 1, "end_episode_id": 4,
                            "species": {...} | None, "home_planet": {...} | None}],
            "episodes": [{"episode_id": 1, "title": "Rose", "air_date": ...,
                          "runtime_minutes": 45, "enemies": [...], "planets": [...]}]
        }
    """
    doctor_query = (
        select(models.Doctor)
        .options(
            selectinload(models.Doctor.actor),
            selectinload(models.Doctor.first_episode),
            selectinload(models.Doctor.last_episode),
        )
        .where(models.Doctor.doctor_id == doctor_id)
        .execution_options(populate_existing=True)
    )
    doctor = (await db.execute(doctor_query)).scalars().first()
    if doctor is None:
        return None

    link = models.DoctorCompanion

    # Companions: species and home planet may be null
    companion_query = (
        select(
            models.Companion.companion_id,
            models.Companion.name.label("companion_name"),
            models.Species.species_id,
            models.Species.name.label("species_name"),
            models.Planet.planet_id.label("companion_planet_id"),
            models.Planet.name.label("companion_planet_name"),
            link.start_episode_id,
            link.end_episode_id,
        )
        .select_from(link)
        .join(models.Companion, link.companion_id == models.Companion.companion_id)
        .outerjoin(
            models.Species, models.Companion.species_id == models.Species.species_id
        )
        .outerjoin(
            models.Planet, models.Companion.home_planet_id == models.Planet.planet_id
        )
        .where(link.doctor_id == doctor_id)
        .distinct()
        .order_by(models.Companion.companion_id)
    )
    companion_rows = (await db.execute(companion_query)).all()

    # Episodes reachable through the companion stints only
    episode_query = (
        select(
            models.Episode.episode_id,
            models.Episode.title,
            models.Episode.air_date,
            models.Episode.runtime_minutes,
        )
        .select_from(link)
        .join(
            models.Episode,
            or_(
                models.Episode.episode_id == link.start_episode_id,
                models.Episode.episode_id == link.end_episode_id,
            ),
        )
        .where(link.doctor_id == doctor_id)
        .distinct()
        .order_by(models.Episode.air_date, models.Episode.episode_id)
    )
    episode_rows = (await db.execute(episode_query)).all()

    episode_ids = [row.episode_id for row in episode_rows]
    enemy_rows = []
    planet_rows = []

    if episode_ids:
        enemy_query = (
            select(
                models.EnemyEpisode.episode_id,
                models.Enemy.enemy_id,
                models.Enemy.name.label("enemy_name"),
                models.Enemy.threat_level,
            )
            .select_from(models.EnemyEpisode)
            .join(models.Enemy, models.EnemyEpisode.enemy_id == models.Enemy.enemy_id)
            .where(models.EnemyEpisode.episode_id.in_(episode_ids))
            .order_by(models.Enemy.enemy_id)
        )
        enemy_rows = (await db.execute(enemy_query)).all()

        planet_query = (
            select(
                models.EpisodeLocation.episode_id,
                models.Planet.planet_id,
                models.Planet.name.label("planet_name"),
            )
            .select_from(models.EpisodeLocation)
            .join(
                models.Planet,
                models.EpisodeLocation.planet_id == models.Planet.planet_id,
            )
            .where(models.EpisodeLocation.episode_id.in_(episode_ids))
            .order_by(models.EpisodeLocation.visit_order, models.Planet.planet_id)
        )
        planet_rows = (await db.execute(planet_query)).all()

    result = schemas.DoctorResponse.model_validate(doctor).model_dump()

    result["companions"] = [
        {
            "companion_id": row.companion_id,
            "name": row.companion_name,
            "start_episode_id": row.start_episode_id,
            "end_episode_id": row.end_episode_id,
            "species": (
                {"species_id": row.species_id, "name": row.species_name}
                if row.species_id is not None
                else None
            ),
            "home_planet": (
                {"planet_id": row.companion_planet_id, "name": row.companion_planet_name}
                if row.companion_planet_id is not None
                else None
            ),
        }
        for row in companion_rows
    ]

    # Small result sets, a linear filter per episode is enough
    result["episodes"] = [
        {
            "episode_id": row.episode_id,
            "title": row.title,
            "air_date": row.air_date,
            "runtime_minutes": row.runtime_minutes,
            "enemies": [
                {
                    "enemy_id": enemy.enemy_id,
                    "name": enemy.enemy_name,
                    "threat_level": enemy.threat_level,
                }
                for enemy in enemy_rows
                if enemy.episode_id == row.episode_id
            ],
            "planets": [
                {"planet_id": planet.planet_id, "name": planet.planet_name}
                for planet in planet_rows
                if planet.episode_id == row.episode_id
            ],
        }
        for row in episode_rows
    ]

    return result


async def get_episode_with_all_details(
    episode_id: int, db: AsyncSession
) -> Optional[Dict[str, Any]]:
    """
    Return an episode with season/writer/director, its enemies and planets,
    and every Doctor whose companion stint starts or ends in it.
    """
    episode_query = (
        select(models.Episode)
        .options(
            selectinload(models.Episode.season),
            selectinload(models.Episode.writer),
            selectinload(models.Episode.director),
            selectinload(models.Episode.enemy_links)
            .selectinload(models.EnemyEpisode.enemy)
            .options(
                selectinload(models.Enemy.home_planet),
                selectinload(models.Enemy.species),
            ),
            selectinload(models.Episode.planet_links).selectinload(
                models.EpisodeLocation.planet
            ),
        )
        .where(models.Episode.episode_id == episode_id)
        .execution_options(populate_existing=True)
    )
    episode = (await db.execute(episode_query)).scalars().first()
    if episode is None:
        return None

    link = models.DoctorCompanion
    touches_episode = or_(
        link.start_episode_id == episode_id, link.end_episode_id == episode_id
    )

    link_query = (
        select(link)
        .options(selectinload(link.companion))
        .where(touches_episode)
        .order_by(link.doctor_id, link.companion_id)
        .execution_options(populate_existing=True)
    )
    links = (await db.execute(link_query)).scalars().all()

    doctor_query = (
        select(models.Doctor)
        .options(
            selectinload(models.Doctor.actor),
            selectinload(models.Doctor.first_episode),
            selectinload(models.Doctor.last_episode),
        )
        .where(models.Doctor.doctor_id.in_(select(link.doctor_id).where(touches_episode)))
        .order_by(models.Doctor.incarnation_number)
        .execution_options(populate_existing=True)
    )
    doctors = (await db.execute(doctor_query)).scalars().all()

    result = schemas.EpisodeResponse.model_validate(episode).model_dump()

    result["enemies"] = [
        {
            **schemas.EnemyResponse.model_validate(enemy_link.enemy).model_dump(),
            "role": enemy_link.role,
        }
        for enemy_link in sorted(episode.enemy_links, key=lambda item: item.enemy_id)
    ]
    result["planets"] = [
        {
            **schemas.PlanetResponse.model_validate(location.planet).model_dump(),
            "visit_order": location.visit_order,
        }
        for location in sorted(
            episode.planet_links, key=lambda item: (item.visit_order or 0, item.planet_id)
        )
    ]
    result["doctors"] = [_doctor_with_companions(doctor, links) for doctor in doctors]

    return result


def _doctor_with_companions(doctor: models.Doctor, links: List[models.DoctorCompanion]):
    entry = schemas.DoctorResponse.model_validate(doctor).model_dump()
    entry["companions"] = [
        {
            **schemas.CompanionResponse.model_validate(item.companion).model_dump(),
            "start_episode_id": item.start_episode_id,
            "end_episode_id": item.end_episode_id,
        }
        for item in links
        if item.doctor_id == doctor.doctor_id
    ]
    return entry
