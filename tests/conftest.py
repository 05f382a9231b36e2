import os
from datetime import date

# The app reads its settings at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RUN_MIGRATIONS", "false")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core import models
from app.core.database import Base, get_db

# Force to use a throwaway in-memory db for tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# Fresh database for every test, StaticPool keeps the single in-memory connection alive
@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        # Create all tables
        await conn.run_sync(Base.metadata.create_all)
    yield engine  # Tests happens here
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    TestingSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# Actor to hang new doctors on
@pytest_asyncio.fixture(scope="function")
async def actor_id(db_session: AsyncSession):
    actor = models.Actor(name="Peter Capaldi", nationality="Scottish")
    db_session.add(actor)
    await db_session.commit()
    return actor.actor_id


@pytest_asyncio.fixture(scope="function")
async def season_id(db_session: AsyncSession):
    season = models.Season(series_number=8, year=2014)
    db_session.add(season)
    await db_session.commit()
    return season.season_id


# Small universe: Doctor 10 travels with Rose from "Rose" to "The Parting of
# the Ways"; the Autons attack Earth in "Rose"; Doctor 9 has no companions;
# the Daleks appear nowhere. Only ids are returned, rows expire on rollback.
@pytest_asyncio.fixture(scope="function")
async def seeded(db_session: AsyncSession):
    tennant = models.Actor(name="David Tennant", nationality="Scottish")
    eccleston = models.Actor(name="Christopher Eccleston", nationality="British")
    piper = models.Actor(name="Billie Piper", nationality="British")
    writer = models.Writer(name="Russell T Davies")
    director = models.Director(name="Keith Boak")
    earth = models.Planet(name="Earth", galaxy="Milky Way")
    skaro = models.Planet(name="Skaro", galaxy="Unknown")
    db_session.add_all([tennant, eccleston, piper, writer, director, earth, skaro])
    await db_session.flush()

    human = models.Species(name="Human", home_planet_id=earth.planet_id)
    kaled = models.Species(name="Dalek", home_planet_id=skaro.planet_id)
    season = models.Season(series_number=1, year=2005, showrunner_id=writer.writer_id)
    db_session.add_all([human, kaled, season])
    await db_session.flush()

    def episode(title, number, air_date):
        return models.Episode(
            season_id=season.season_id,
            writer_id=writer.writer_id,
            director_id=director.director_id,
            title=title,
            episode_number=number,
            air_date=air_date,
            runtime_minutes=45,
        )

    rose = episode("Rose", 1, date(2005, 3, 26))
    end_of_world = episode("The End of the World", 2, date(2005, 4, 2))
    parting = episode("The Parting of the Ways", 13, date(2005, 6, 18))
    db_session.add_all([rose, end_of_world, parting])
    await db_session.flush()

    tenth = models.Doctor(
        incarnation_number=10,
        actor_id=tennant.actor_id,
        first_episode_id=rose.episode_id,
        last_episode_id=parting.episode_id,
        catchphrase="Allons-y!",
    )
    ninth = models.Doctor(
        incarnation_number=9,
        actor_id=eccleston.actor_id,
        first_episode_id=end_of_world.episode_id,
        last_episode_id=end_of_world.episode_id,
        catchphrase="Fantastic!",
    )
    rose_tyler = models.Companion(
        name="Rose Tyler",
        actor_id=piper.actor_id,
        species_id=human.species_id,
        home_planet_id=earth.planet_id,
    )
    auton = models.Enemy(name="Auton", threat_level=6)
    dalek = models.Enemy(
        name="Dalek",
        threat_level=10,
        species_id=kaled.species_id,
        home_planet_id=skaro.planet_id,
    )
    db_session.add_all([tenth, ninth, rose_tyler, auton, dalek])
    await db_session.flush()

    db_session.add_all(
        [
            models.DoctorCompanion(
                doctor_id=tenth.doctor_id,
                companion_id=rose_tyler.companion_id,
                start_episode_id=rose.episode_id,
                end_episode_id=parting.episode_id,
            ),
            models.EnemyEpisode(
                enemy_id=auton.enemy_id, episode_id=rose.episode_id, role="Main Antagonist"
            ),
            models.EpisodeLocation(
                episode_id=rose.episode_id, planet_id=earth.planet_id, visit_order=1
            ),
        ]
    )
    await db_session.commit()

    return {
        "tenth": tenth.doctor_id,
        "ninth": ninth.doctor_id,
        "rose": rose.episode_id,
        "end_of_world": end_of_world.episode_id,
        "parting": parting.episode_id,
        "rose_tyler": rose_tyler.companion_id,
        "auton": auton.enemy_id,
        "dalek": dalek.enemy_id,
        "earth": earth.planet_id,
        "skaro": skaro.planet_id,
    }
