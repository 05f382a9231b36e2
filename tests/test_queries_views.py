from datetime import date

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models
from app.core.db_objects import create_view_statements, provision_views


@pytest_asyncio.fixture(scope="function")
async def views(db_session: AsyncSession, seeded):
    conn = await db_session.connection()
    await provision_views(conn)
    await db_session.commit()
    return seeded


@pytest.mark.asyncio
async def test_doctor_summary(client: AsyncClient, views):
    response = await client.get("/api/queries/view/doctor-summary")
    assert response.status_code == 200
    rows = {row["incarnation_number"]: row for row in response.json()["data"]}

    tenth = rows[10]
    assert tenth["actor_name"] == "David Tennant"
    assert tenth["catchphrase"] == "Allons-y!"
    assert tenth["total_episodes"] == 2
    assert tenth["total_companions"] == 1
    assert tenth["total_enemies"] == 1
    assert tenth["first_episode_date"] == "2005-03-26"
    assert tenth["last_episode_date"] == "2005-06-18"

    ninth = rows[9]
    assert ninth["total_episodes"] == 1
    assert ninth["total_companions"] == 0
    assert ninth["total_enemies"] == 0


@pytest.mark.asyncio
async def test_enemy_summary(client: AsyncClient, views):
    response = await client.get("/api/queries/view/enemy-summary")
    assert response.status_code == 200
    rows = {row["enemy_name"]: row for row in response.json()["data"]}

    assert rows["Auton"]["episode_count"] == 1
    assert rows["Auton"]["episodes"] == "Rose"
    assert rows["Auton"]["species_name"] is None

    assert rows["Dalek"]["episode_count"] == 0
    assert rows["Dalek"]["episodes"] is None
    assert rows["Dalek"]["home_planet"] == "Skaro"


@pytest.mark.asyncio
async def test_doctor_summary_not_provisioned(client: AsyncClient, seeded):
    """Missing view names itself and how to create it"""
    response = await client.get("/api/queries/view/doctor-summary")
    assert response.status_code == 500
    message = response.json()["message"]
    assert "doctor_episode_summary" in message
    assert "create_db_objects" in message


@pytest.mark.asyncio
async def test_enemy_summary_not_provisioned(client: AsyncClient):
    response = await client.get("/api/queries/view/enemy-summary")
    assert response.status_code == 500
    assert "enemy_appearance_summary" in response.json()["message"]


def test_view_statements_per_dialect():
    postgres = create_view_statements("postgresql")
    sqlite = create_view_statements("sqlite")
    assert postgres[0] == "DROP VIEW IF EXISTS doctor_episode_summary"
    assert "STRING_AGG" in postgres[-1]
    assert "GROUP_CONCAT" in sqlite[-1]

    with pytest.raises(ValueError):
        create_view_statements("oracle")
    with pytest.raises(ValueError):
        create_view_statements("mysql")


@pytest.mark.asyncio
async def test_enemy_summary_titles_in_air_date_order(
    client: AsyncClient, db_session: AsyncSession, views
):
    """Titles follow air date, not insertion order"""
    season = models.Season(series_number=7, year=1970)
    db_session.add(season)
    await db_session.flush()
    spearhead = models.Episode(
        season_id=season.season_id,
        title="Spearhead from Space",
        air_date=date(1970, 1, 3),
    )
    db_session.add(spearhead)
    await db_session.flush()
    db_session.add(
        models.EnemyEpisode(enemy_id=views["auton"], episode_id=spearhead.episode_id)
    )
    await db_session.commit()

    response = await client.get("/api/queries/view/enemy-summary")
    assert response.status_code == 200
    rows = {row["enemy_name"]: row for row in response.json()["data"]}
    assert rows["Auton"]["episode_count"] == 2
    assert rows["Auton"]["episodes"] == "Spearhead from Space, Rose"
