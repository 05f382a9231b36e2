"""create_schema

Revision ID: 0001
Revises:
Create Date: 2025-11-20 10:00:00.000000

Creates the 16 tables, parents before the tables that reference them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "actors",
        sa.Column("actor_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("birth_date", sa.Date()),
        sa.Column("nationality", sa.String(100)),
    )
    op.create_table(
        "writers",
        sa.Column("writer_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("notable_works", sa.Text()),
    )
    op.create_table(
        "directors",
        sa.Column("director_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_table(
        "planets",
        sa.Column("planet_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("galaxy", sa.String(255)),
        sa.Column("description", sa.Text()),
    )
    op.create_table(
        "species",
        sa.Column("species_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("home_planet_id", sa.Integer(), sa.ForeignKey("planets.planet_id")),
        sa.Column("technology_level", sa.String(100)),
    )
    op.create_table(
        "seasons",
        sa.Column("season_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("series_number", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer()),
        sa.Column("showrunner_id", sa.Integer(), sa.ForeignKey("writers.writer_id")),
    )
    op.create_table(
        "episodes",
        sa.Column("episode_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "season_id",
            sa.Integer(),
            sa.ForeignKey("seasons.season_id"),
            nullable=False,
        ),
        sa.Column("writer_id", sa.Integer(), sa.ForeignKey("writers.writer_id")),
        sa.Column("director_id", sa.Integer(), sa.ForeignKey("directors.director_id")),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("episode_number", sa.Integer()),
        sa.Column("air_date", sa.Date()),
        sa.Column("runtime_minutes", sa.Integer()),
    )
    op.create_index("ix_episodes_season_id", "episodes", ["season_id"])
    op.create_index("ix_episodes_air_date", "episodes", ["air_date"])

    op.create_table(
        "doctors",
        sa.Column("doctor_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("incarnation_number", sa.Integer(), nullable=False, unique=True),
        sa.Column(
            "actor_id", sa.Integer(), sa.ForeignKey("actors.actor_id"), nullable=False
        ),
        sa.Column(
            "first_episode_id", sa.Integer(), sa.ForeignKey("episodes.episode_id")
        ),
        sa.Column("last_episode_id", sa.Integer(), sa.ForeignKey("episodes.episode_id")),
        sa.Column("catchphrase", sa.String(255)),
    )
    op.create_table(
        "companions",
        sa.Column("companion_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("actors.actor_id")),
        sa.Column("species_id", sa.Integer(), sa.ForeignKey("species.species_id")),
        sa.Column("home_planet_id", sa.Integer(), sa.ForeignKey("planets.planet_id")),
        sa.Column(
            "first_episode_id", sa.Integer(), sa.ForeignKey("episodes.episode_id")
        ),
        sa.Column("last_episode_id", sa.Integer(), sa.ForeignKey("episodes.episode_id")),
    )
    op.create_table(
        "enemies",
        sa.Column("enemy_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("species_id", sa.Integer(), sa.ForeignKey("species.species_id")),
        sa.Column("home_planet_id", sa.Integer(), sa.ForeignKey("planets.planet_id")),
        sa.Column("threat_level", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "threat_level BETWEEN 1 AND 10", name="ck_enemies_threat_level"
        ),
    )
    op.create_table(
        "characters",
        sa.Column("character_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("gender", sa.String(50)),
        sa.Column("age", sa.Integer()),
        sa.Column("biography", sa.Text()),
        sa.Column("species_id", sa.Integer(), sa.ForeignKey("species.species_id")),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.doctor_id")),
        sa.Column("enemy_id", sa.Integer(), sa.ForeignKey("enemies.enemy_id")),
    )
    op.create_table(
        "tardis",
        sa.Column("tardis_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_doctor_id", sa.Integer(), sa.ForeignKey("doctors.doctor_id")),
        sa.Column("type", sa.String(100)),
        sa.Column("chameleon_status", sa.String(255)),
    )

    # Join tables
    op.create_table(
        "doctor_companions",
        sa.Column(
            "doctor_id",
            sa.Integer(),
            sa.ForeignKey("doctors.doctor_id"),
            primary_key=True,
        ),
        sa.Column(
            "companion_id",
            sa.Integer(),
            sa.ForeignKey("companions.companion_id"),
            primary_key=True,
        ),
        sa.Column(
            "start_episode_id", sa.Integer(), sa.ForeignKey("episodes.episode_id")
        ),
        sa.Column("end_episode_id", sa.Integer(), sa.ForeignKey("episodes.episode_id")),
    )
    op.create_index(
        "ix_doctor_companions_start_episode_id",
        "doctor_companions",
        ["start_episode_id"],
    )
    op.create_index(
        "ix_doctor_companions_end_episode_id", "doctor_companions", ["end_episode_id"]
    )
    op.create_table(
        "episode_appearances",
        sa.Column("appearance_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "episode_id",
            sa.Integer(),
            sa.ForeignKey("episodes.episode_id"),
            nullable=False,
        ),
        sa.Column(
            "character_id",
            sa.Integer(),
            sa.ForeignKey("characters.character_id"),
            nullable=False,
        ),
        sa.Column("character_type", sa.String(50)),
        sa.Column("screen_time_min", sa.Integer()),
    )
    op.create_table(
        "episode_locations",
        sa.Column(
            "episode_id",
            sa.Integer(),
            sa.ForeignKey("episodes.episode_id"),
            primary_key=True,
        ),
        sa.Column(
            "planet_id", sa.Integer(), sa.ForeignKey("planets.planet_id"), primary_key=True
        ),
        sa.Column("visit_order", sa.Integer()),
    )
    op.create_table(
        "enemy_episodes",
        sa.Column(
            "enemy_id", sa.Integer(), sa.ForeignKey("enemies.enemy_id"), primary_key=True
        ),
        sa.Column(
            "episode_id",
            sa.Integer(),
            sa.ForeignKey("episodes.episode_id"),
            primary_key=True,
        ),
        sa.Column("role", sa.String(100)),
    )


def downgrade() -> None:
    # Children first
    for table in (
        "enemy_episodes",
        "episode_locations",
        "episode_appearances",
        "doctor_companions",
        "tardis",
        "characters",
        "enemies",
        "companions",
        "doctors",
        "episodes",
        "seasons",
        "species",
        "planets",
        "directors",
        "writers",
        "actors",
    ):
        op.drop_table(table)
