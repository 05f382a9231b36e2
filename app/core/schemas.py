from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.models import THREAT_LEVEL_MAX, THREAT_LEVEL_MIN


def _reject_null(value, field_name: str):
    # Only reached when a client sends an explicit null, unset fields skip validation
    if value is None:
        raise ValueError(f"{field_name} cannot be null")
    return value


# =========================
# SUPPORTING ENTITIES
# =========================
class ActorResponse(BaseModel):
    actor_id: int
    name: str
    birth_date: Optional[date] = None
    nationality: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class WriterResponse(BaseModel):
    writer_id: int
    name: str
    notable_works: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DirectorResponse(BaseModel):
    director_id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class SeasonResponse(BaseModel):
    season_id: int
    series_number: int
    year: Optional[int] = None
    showrunner_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class PlanetResponse(BaseModel):
    planet_id: int
    name: str
    galaxy: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SpeciesResponse(BaseModel):
    species_id: int
    name: str
    home_planet_id: Optional[int] = None
    technology_level: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CompanionResponse(BaseModel):
    companion_id: int
    name: str
    actor_id: Optional[int] = None
    species_id: Optional[int] = None
    home_planet_id: Optional[int] = None
    first_episode_id: Optional[int] = None
    last_episode_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


# =========================
# EPISODE
# =========================
class EpisodeSummary(BaseModel):
    episode_id: int
    season_id: int
    title: str
    episode_number: Optional[int] = None
    air_date: Optional[date] = None
    runtime_minutes: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class EpisodeBase(BaseModel):
    writer_id: Optional[int] = Field(default=None, gt=0)
    director_id: Optional[int] = Field(default=None, gt=0)
    episode_number: Optional[int] = Field(default=None, gt=0)
    air_date: Optional[date] = None
    runtime_minutes: Optional[int] = Field(default=None, gt=0)


class EpisodeCreate(EpisodeBase):
    season_id: int = Field(gt=0)
    title: str

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value.strip()


class EpisodeUpdate(EpisodeBase):
    season_id: Optional[int] = Field(default=None, gt=0)
    title: Optional[str] = None

    @field_validator("season_id")
    @classmethod
    def season_not_null(cls, value, info):
        return _reject_null(value, info.field_name)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("Title is required")
        return value.strip()


class EpisodeResponse(EpisodeSummary):
    writer_id: Optional[int] = None
    director_id: Optional[int] = None

    season: Optional[SeasonResponse] = None
    writer: Optional[WriterResponse] = None
    director: Optional[DirectorResponse] = None


# =========================
# DOCTOR
# =========================
class DoctorCreate(BaseModel):
    incarnation_number: int = Field(gt=0)
    actor_id: int = Field(gt=0)
    first_episode_id: Optional[int] = Field(default=None, gt=0)
    last_episode_id: Optional[int] = Field(default=None, gt=0)
    catchphrase: Optional[str] = None


class DoctorUpdate(BaseModel):
    incarnation_number: Optional[int] = Field(default=None, gt=0)
    actor_id: Optional[int] = Field(default=None, gt=0)
    first_episode_id: Optional[int] = Field(default=None, gt=0)
    last_episode_id: Optional[int] = Field(default=None, gt=0)
    catchphrase: Optional[str] = None

    @field_validator("incarnation_number", "actor_id")
    @classmethod
    def required_not_null(cls, value, info):
        return _reject_null(value, info.field_name)


class DoctorResponse(BaseModel):
    doctor_id: int
    incarnation_number: int
    actor_id: int
    first_episode_id: Optional[int] = None
    last_episode_id: Optional[int] = None
    catchphrase: Optional[str] = None

    actor: Optional[ActorResponse] = None
    first_episode: Optional[EpisodeSummary] = None
    last_episode: Optional[EpisodeSummary] = None

    model_config = ConfigDict(from_attributes=True)


# =========================
# ENEMY
# =========================
class EnemyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    threat_level: int = Field(ge=THREAT_LEVEL_MIN, le=THREAT_LEVEL_MAX)
    species_id: Optional[int] = Field(default=None, gt=0)
    home_planet_id: Optional[int] = Field(default=None, gt=0)


class EnemyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    threat_level: Optional[int] = Field(
        default=None, ge=THREAT_LEVEL_MIN, le=THREAT_LEVEL_MAX
    )
    species_id: Optional[int] = Field(default=None, gt=0)
    home_planet_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("name", "threat_level")
    @classmethod
    def required_not_null(cls, value, info):
        return _reject_null(value, info.field_name)


class EnemyResponse(BaseModel):
    enemy_id: int
    name: str
    threat_level: int
    species_id: Optional[int] = None
    home_planet_id: Optional[int] = None

    species: Optional[SpeciesResponse] = None
    home_planet: Optional[PlanetResponse] = None

    model_config = ConfigDict(from_attributes=True)


class ThreatLevelUpdate(BaseModel):
    # Range and type are checked by the query layer so every rejection is a 400
    threat_level: Any = None


# =========================
# NATURAL-LANGUAGE QUERY
# =========================
class NaturalLanguageQuery(BaseModel):
    query: Optional[str] = None


class NaturalLanguageAnswer(BaseModel):
    answer: Optional[str] = None
    query: str
    model: str


class ValidationErrorItem(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    status: str = "error"
    statusCode: int
    message: str
    timestamp: str
    path: str
    errors: Optional[List[ValidationErrorItem]] = None
    details: Optional[str] = None
