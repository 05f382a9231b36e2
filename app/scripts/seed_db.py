"""
Load the small reference dataset into an empty database.

Usage:
    python -m app.scripts.seed_db

Skips when actors already exist. Rows are inserted per table in foreign-key
order so generated ids can be referenced by later tables.
"""

import asyncio
import logging
import sys
from datetime import date

from app.core import repository
from app.core.database import AsyncSessionLocal, engine
from app.core.errors import AppError
from app.core.repository import EntityRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _d(value: str) -> date:
    return date.fromisoformat(value)


async def seed(db) -> bool:
    """
    Insert the dataset on the given session.

    Returns:
        False when the database already had data, True after seeding.
    """

    def repo(descriptor):
        return EntityRepository(db, descriptor)

    if await repo(repository.ACTORS).exists():
        logger.warning("Database already contains data. Skipping seed.")
        return False

    actors = await repo(repository.ACTORS).create_many(
        [
            {"name": "William Hartnell", "birth_date": _d("1908-01-08"), "nationality": "British"},
            {"name": "Patrick Troughton", "birth_date": _d("1920-03-25"), "nationality": "British"},
            {"name": "Jon Pertwee", "birth_date": _d("1919-07-07"), "nationality": "British"},
            {"name": "Tom Baker", "birth_date": _d("1934-01-20"), "nationality": "British"},
            {"name": "David Tennant", "birth_date": _d("1971-04-18"), "nationality": "Scottish"},
            {"name": "Matt Smith", "birth_date": _d("1982-10-28"), "nationality": "British"},
            {"name": "Jodie Whittaker", "birth_date": _d("1982-06-17"), "nationality": "British"},
            {"name": "Billie Piper", "birth_date": _d("1982-09-22"), "nationality": "British"},
            {"name": "Karen Gillan", "birth_date": _d("1987-11-28"), "nationality": "Scottish"},
            {"name": "Jenna Coleman", "birth_date": _d("1986-04-27"), "nationality": "British"},
        ]
    )
    logger.info("Actors seeded")

    writers = await repo(repository.WRITERS).create_many(
        [
            {"name": "Russell T Davies", "notable_works": "Doctor Who (2005-2010), Torchwood"},
            {"name": "Steven Moffat", "notable_works": "Doctor Who (2010-2017), Sherlock"},
            {"name": "Terry Nation", "notable_works": "Creator of the Daleks"},
            {"name": "Robert Holmes", "notable_works": "Classic Who writer"},
            {"name": "Chris Chibnall", "notable_works": "Doctor Who (2018-2022), Broadchurch"},
        ]
    )
    logger.info("Writers seeded")

    directors = await repo(repository.DIRECTORS).create_many(
        [
            {"name": "Graeme Harper"},
            {"name": "Euros Lyn"},
            {"name": "James Hawes"},
            {"name": "Rachel Talalay"},
            {"name": "Jamie Payne"},
        ]
    )
    logger.info("Directors seeded")

    planets = await repo(repository.PLANETS).create_many(
        [
            {"name": "Gallifrey", "galaxy": "Kasterborous", "description": "Home planet of the Time Lords"},
            {"name": "Earth", "galaxy": "Milky Way", "description": "Human homeworld"},
            {"name": "Skaro", "galaxy": "Unknown", "description": "Home planet of the Daleks"},
            {"name": "Mondas", "galaxy": "Unknown", "description": "Twin planet of Earth"},
            {"name": "New Earth", "galaxy": "Unknown", "description": "Colony planet"},
        ]
    )
    gallifrey, earth, skaro, mondas, new_earth = [p.planet_id for p in planets]
    logger.info("Planets seeded")

    species = await repo(repository.SPECIES).create_many(
        [
            {"name": "Time Lord", "home_planet_id": gallifrey, "technology_level": "Advanced"},
            {"name": "Human", "home_planet_id": earth, "technology_level": "Moderate"},
            {"name": "Dalek", "home_planet_id": skaro, "technology_level": "Advanced"},
            {"name": "Cyberman", "home_planet_id": mondas, "technology_level": "Advanced"},
            {"name": "Ood", "home_planet_id": new_earth, "technology_level": "Moderate"},
        ]
    )
    time_lord, human, dalek, cyberman, _ = [s.species_id for s in species]
    logger.info("Species seeded")

    w = [writer.writer_id for writer in writers]
    dr = [director.director_id for director in directors]

    seasons = await repo(repository.SEASONS).create_many(
        [
            {"series_number": 1, "year": 2005, "showrunner_id": w[0]},
            {"series_number": 2, "year": 2006, "showrunner_id": w[0]},
            {"series_number": 5, "year": 2010, "showrunner_id": w[1]},
            {"series_number": 11, "year": 2018, "showrunner_id": w[4]},
            {"series_number": 13, "year": 2021, "showrunner_id": w[4]},
        ]
    )
    s = [season.season_id for season in seasons]
    logger.info("Seasons seeded")

    # (season, writer, director, title, number, air date, runtime)
    episode_rows = [
        (s[0], w[0], dr[0], "Rose", 1, "2005-03-26", 45),
        (s[0], w[0], dr[1], "The End of the World", 2, "2005-04-02", 45),
        (s[0], w[0], dr[2], "The Unquiet Dead", 3, "2005-04-09", 45),
        (s[1], w[0], dr[1], "New Earth", 1, "2006-04-15", 45),
        (s[1], w[0], dr[2], "Tooth and Claw", 2, "2006-04-22", 45),
        (s[2], w[1], dr[3], "The Eleventh Hour", 1, "2010-04-03", 60),
        (s[2], w[1], dr[4], "The Beast Below", 2, "2010-04-10", 45),
        (s[3], w[4], dr[4], "The Woman Who Fell to Earth", 1, "2018-10-07", 50),
        (s[4], w[4], dr[3], "The Halloween Apocalypse", 1, "2021-10-31", 50),
    ]
    episodes = await repo(repository.EPISODES).create_many(
        [
            {
                "season_id": season_id,
                "writer_id": writer_id,
                "director_id": director_id,
                "title": title,
                "episode_number": number,
                "air_date": _d(air_date),
                "runtime_minutes": runtime,
            }
            for season_id, writer_id, director_id, title, number, air_date, runtime in episode_rows
        ]
    )
    ep = [episode.episode_id for episode in episodes]
    logger.info("Episodes seeded")

    a = [actor.actor_id for actor in actors]

    doctors = await repo(repository.DOCTORS).create_many(
        [
            {"actor_id": a[4], "first_episode_id": ep[0], "last_episode_id": ep[4], "incarnation_number": 10, "catchphrase": "Allons-y!"},
            {"actor_id": a[5], "first_episode_id": ep[5], "last_episode_id": ep[6], "incarnation_number": 11, "catchphrase": "Geronimo!"},
            {"actor_id": a[6], "first_episode_id": ep[7], "last_episode_id": ep[8], "incarnation_number": 13, "catchphrase": "Brilliant!"},
        ]
    )
    doc = [doctor.doctor_id for doctor in doctors]
    logger.info("Doctors seeded")

    companions = await repo(repository.COMPANIONS).create_many(
        [
            {"actor_id": a[7], "first_episode_id": ep[0], "last_episode_id": ep[3], "name": "Rose Tyler", "species_id": human, "home_planet_id": earth},
            {"actor_id": a[8], "first_episode_id": ep[5], "last_episode_id": ep[6], "name": "Amy Pond", "species_id": human, "home_planet_id": earth},
            {"actor_id": a[9], "first_episode_id": ep[6], "name": "Clara Oswald", "species_id": human, "home_planet_id": earth},
        ]
    )
    comp = [companion.companion_id for companion in companions]
    logger.info("Companions seeded")

    enemies = await repo(repository.ENEMIES).create_many(
        [
            {"name": "Dalek", "home_planet_id": skaro, "species_id": dalek, "threat_level": 10},
            {"name": "Cyberman", "home_planet_id": mondas, "species_id": cyberman, "threat_level": 9},
            {"name": "The Master", "home_planet_id": gallifrey, "species_id": time_lord, "threat_level": 10},
            {"name": "Weeping Angel", "home_planet_id": None, "species_id": None, "threat_level": 8},
            {"name": "Silence", "home_planet_id": None, "species_id": None, "threat_level": 7},
        ]
    )
    en = [enemy.enemy_id for enemy in enemies]
    logger.info("Enemies seeded")

    characters = await repo(repository.CHARACTERS).create_many(
        [
            {"name": "Jackie Tyler", "gender": "Female", "age": 45, "biography": "Rose Tyler's mother", "species_id": human},
            {"name": "Mickey Smith", "gender": "Male", "age": 25, "biography": "Rose Tyler's boyfriend", "species_id": human},
            {"name": "Rory Williams", "gender": "Male", "age": 28, "biography": "Amy Pond's husband", "species_id": human},
            {"name": "River Song", "gender": "Female", "age": 200, "biography": "Time Lord hybrid", "species_id": time_lord, "doctor_id": doc[1]},
        ]
    )
    ch = [character.character_id for character in characters]
    logger.info("Characters seeded")

    await repo(repository.TARDISES).create_many(
        [
            {"owner_doctor_id": doctor_id, "type": "Type 40", "chameleon_status": "Broken (Police Box)"}
            for doctor_id in doc
        ]
    )
    logger.info("TARDIS seeded")

    await repo(repository.DOCTOR_COMPANIONS).create_many(
        [
            {"doctor_id": doc[0], "companion_id": comp[0], "start_episode_id": ep[0], "end_episode_id": ep[3]},
            {"doctor_id": doc[1], "companion_id": comp[1], "start_episode_id": ep[5], "end_episode_id": ep[6]},
            # Still traveling
            {"doctor_id": doc[1], "companion_id": comp[2], "start_episode_id": ep[6], "end_episode_id": None},
        ]
    )
    logger.info("Doctor-Companions seeded")

    await repo(repository.EPISODE_APPEARANCES).create_many(
        [
            {"episode_id": ep[0], "character_type": "Supporting", "character_id": ch[0], "screen_time_min": 10},
            {"episode_id": ep[0], "character_type": "Supporting", "character_id": ch[1], "screen_time_min": 5},
            {"episode_id": ep[5], "character_type": "Supporting", "character_id": ch[2], "screen_time_min": 30},
            {"episode_id": ep[6], "character_type": "Supporting", "character_id": ch[3], "screen_time_min": 45},
        ]
    )
    logger.info("Episode Appearances seeded")

    await repo(repository.EPISODE_LOCATIONS).create_many(
        [
            {"episode_id": ep[0], "planet_id": earth, "visit_order": 1},
            {"episode_id": ep[1], "planet_id": new_earth, "visit_order": 1},
            {"episode_id": ep[3], "planet_id": new_earth, "visit_order": 1},
            {"episode_id": ep[5], "planet_id": earth, "visit_order": 1},
        ]
    )
    logger.info("Episode Locations seeded")

    await repo(repository.ENEMY_EPISODES).create_many(
        [
            {"enemy_id": en[0], "episode_id": ep[0], "role": "Main Antagonist"},
            {"enemy_id": en[1], "episode_id": ep[1], "role": "Main Antagonist"},
            {"enemy_id": en[2], "episode_id": ep[5], "role": "Main Antagonist"},
            {"enemy_id": en[3], "episode_id": ep[6], "role": "Main Antagonist"},
        ]
    )
    logger.info("Enemy Episodes seeded")

    return True


async def seed_database() -> bool:
    try:
        async with AsyncSessionLocal() as db:
            return await seed(db)
    finally:
        await engine.dispose()


def main() -> int:
    try:
        seeded = asyncio.run(seed_database())
    except AppError as error:
        logger.error(f"Error seeding database: {error.message}")
        return 1
    if seeded:
        logger.info("Database seeding completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
