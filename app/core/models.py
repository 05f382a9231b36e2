from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.core.database import Base

THREAT_LEVEL_MIN = 1
THREAT_LEVEL_MAX = 10


# =========================
# People behind the show
# =========================
class Actor(Base):
    __tablename__ = "actors"

    actor_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    birth_date = Column(Date)
    nationality = Column(String(100))


class Writer(Base):
    __tablename__ = "writers"

    writer_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    notable_works = Column(Text)


class Director(Base):
    __tablename__ = "directors"

    director_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)


# =========================
# Places and species
# =========================
class Planet(Base):
    __tablename__ = "planets"

    planet_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    galaxy = Column(String(255))
    description = Column(Text)


class Species(Base):
    __tablename__ = "species"

    species_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    home_planet_id = Column(Integer, ForeignKey("planets.planet_id"), nullable=True)
    technology_level = Column(String(100))

    home_planet = relationship("Planet")


# =========================
# Seasons and episodes
# =========================
class Season(Base):
    __tablename__ = "seasons"

    season_id = Column(Integer, primary_key=True, autoincrement=True)
    series_number = Column(Integer, nullable=False)
    year = Column(Integer)
    showrunner_id = Column(Integer, ForeignKey("writers.writer_id"), nullable=True)

    showrunner = relationship("Writer")


class Episode(Base):
    __tablename__ = "episodes"

    episode_id = Column(Integer, primary_key=True, autoincrement=True)
    season_id = Column(
        Integer, ForeignKey("seasons.season_id"), nullable=False, index=True
    )
    writer_id = Column(Integer, ForeignKey("writers.writer_id"), nullable=True)
    director_id = Column(Integer, ForeignKey("directors.director_id"), nullable=True)

    title = Column(String(255), nullable=False)
    episode_number = Column(Integer)
    air_date = Column(Date, nullable=True, index=True)
    runtime_minutes = Column(Integer)

    # Relationships
    season = relationship("Season")
    writer = relationship("Writer")
    director = relationship("Director")

    # Deleting an episode leaves its join rows to the database foreign keys
    enemy_links = relationship(
        "EnemyEpisode", back_populates="episode", passive_deletes=True
    )
    planet_links = relationship(
        "EpisodeLocation", back_populates="episode", passive_deletes=True
    )

    enemies = relationship("Enemy", secondary="enemy_episodes", viewonly=True)
    planets = relationship("Planet", secondary="episode_locations", viewonly=True)


# =========================
# Doctors, companions and enemies
# =========================
class Doctor(Base):
    __tablename__ = "doctors"

    doctor_id = Column(Integer, primary_key=True, autoincrement=True)
    incarnation_number = Column(Integer, nullable=False, unique=True)
    actor_id = Column(Integer, ForeignKey("actors.actor_id"), nullable=False)
    first_episode_id = Column(Integer, ForeignKey("episodes.episode_id"), nullable=True)
    last_episode_id = Column(Integer, ForeignKey("episodes.episode_id"), nullable=True)
    catchphrase = Column(String(255))

    # Relationships
    actor = relationship("Actor")
    first_episode = relationship("Episode", foreign_keys=[first_episode_id])
    last_episode = relationship("Episode", foreign_keys=[last_episode_id])

    companions = relationship(
        "Companion", secondary="doctor_companions", viewonly=True
    )


class Companion(Base):
    __tablename__ = "companions"

    companion_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    actor_id = Column(Integer, ForeignKey("actors.actor_id"), nullable=True)
    species_id = Column(Integer, ForeignKey("species.species_id"), nullable=True)
    home_planet_id = Column(Integer, ForeignKey("planets.planet_id"), nullable=True)
    first_episode_id = Column(Integer, ForeignKey("episodes.episode_id"), nullable=True)
    last_episode_id = Column(Integer, ForeignKey("episodes.episode_id"), nullable=True)

    actor = relationship("Actor")
    species = relationship("Species")
    home_planet = relationship("Planet")


class Enemy(Base):
    __tablename__ = "enemies"
    __table_args__ = (
        CheckConstraint(
            f"threat_level BETWEEN {THREAT_LEVEL_MIN} AND {THREAT_LEVEL_MAX}",
            name="ck_enemies_threat_level",
        ),
    )

    enemy_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    species_id = Column(Integer, ForeignKey("species.species_id"), nullable=True)
    home_planet_id = Column(Integer, ForeignKey("planets.planet_id"), nullable=True)
    threat_level = Column(Integer, nullable=False)

    species = relationship("Species")
    home_planet = relationship("Planet")


class Character(Base):
    __tablename__ = "characters"

    character_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    gender = Column(String(50))
    age = Column(Integer)
    biography = Column(Text)
    species_id = Column(Integer, ForeignKey("species.species_id"), nullable=True)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id"), nullable=True)
    enemy_id = Column(Integer, ForeignKey("enemies.enemy_id"), nullable=True)


class Tardis(Base):
    __tablename__ = "tardis"

    tardis_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_doctor_id = Column(Integer, ForeignKey("doctors.doctor_id"), nullable=True)
    type = Column(String(100))
    chameleon_status = Column(String(255))


# =========================
# Join tables
# =========================
class DoctorCompanion(Base):
    """
    One companion's stint with one Doctor.
    A null end episode means the companion is still traveling.
    """

    __tablename__ = "doctor_companions"

    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id"), primary_key=True)
    companion_id = Column(
        Integer, ForeignKey("companions.companion_id"), primary_key=True
    )
    start_episode_id = Column(
        Integer, ForeignKey("episodes.episode_id"), nullable=True, index=True
    )
    end_episode_id = Column(
        Integer, ForeignKey("episodes.episode_id"), nullable=True, index=True
    )

    doctor = relationship("Doctor")
    companion = relationship("Companion")


class EpisodeAppearance(Base):
    __tablename__ = "episode_appearances"

    appearance_id = Column(Integer, primary_key=True, autoincrement=True)
    episode_id = Column(Integer, ForeignKey("episodes.episode_id"), nullable=False)
    character_id = Column(
        Integer, ForeignKey("characters.character_id"), nullable=False
    )
    character_type = Column(String(50))
    screen_time_min = Column(Integer)


class EpisodeLocation(Base):
    __tablename__ = "episode_locations"

    episode_id = Column(Integer, ForeignKey("episodes.episode_id"), primary_key=True)
    planet_id = Column(Integer, ForeignKey("planets.planet_id"), primary_key=True)
    visit_order = Column(Integer)

    episode = relationship("Episode", back_populates="planet_links")
    planet = relationship("Planet")


class EnemyEpisode(Base):
    __tablename__ = "enemy_episodes"

    enemy_id = Column(Integer, ForeignKey("enemies.enemy_id"), primary_key=True)
    episode_id = Column(Integer, ForeignKey("episodes.episode_id"), primary_key=True)
    role = Column(String(100))

    enemy = relationship("Enemy")
    episode = relationship("Episode", back_populates="enemy_links")
