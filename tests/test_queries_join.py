import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models


@pytest.mark.asyncio
async def test_doctor_full_details(client: AsyncClient, seeded):
    """Doctor 10 with Rose, her two episodes, the Autons and Earth"""
    response = await client.get(f"/api/queries/join/doctor/{seeded['tenth']}")
    assert response.status_code == 200
    data = response.json()["data"]

    assert data["incarnation_number"] == 10
    assert data["actor"]["name"] == "David Tennant"

    assert len(data["companions"]) == 1
    companion = data["companions"][0]
    assert companion["name"] == "Rose Tyler"
    assert companion["start_episode_id"] == seeded["rose"]
    assert companion["end_episode_id"] == seeded["parting"]
    assert companion["species"]["name"] == "Human"
    assert companion["home_planet"]["name"] == "Earth"

    episodes = {e["title"]: e for e in data["episodes"]}
    assert list(episodes) == ["Rose", "The Parting of the Ways"]

    rose = episodes["Rose"]
    assert [enemy["name"] for enemy in rose["enemies"]] == ["Auton"]
    assert rose["enemies"][0]["threat_level"] == 6
    assert [planet["name"] for planet in rose["planets"]] == ["Earth"]

    parting = episodes["The Parting of the Ways"]
    assert parting["enemies"] == []
    assert parting["planets"] == []


@pytest.mark.asyncio
async def test_doctor_without_companions(client: AsyncClient, seeded):
    """Own first/last episode is not merged into the episode list"""
    response = await client.get(f"/api/queries/join/doctor/{seeded['ninth']}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_episode"]["title"] == "The End of the World"
    assert data["companions"] == []
    assert data["episodes"] == []


@pytest.mark.asyncio
async def test_doctor_full_details_not_found(client: AsyncClient):
    response = await client.get("/api/queries/join/doctor/9999")
    assert response.status_code == 404
    assert response.json()["message"] == "Doctor not found"


@pytest.mark.asyncio
async def test_episode_with_all_details(client: AsyncClient, seeded):
    response = await client.get(f"/api/queries/join/episode/{seeded['rose']}")
    assert response.status_code == 200
    data = response.json()["data"]

    assert data["title"] == "Rose"
    assert data["season"]["series_number"] == 1

    assert len(data["enemies"]) == 1
    assert data["enemies"][0]["name"] == "Auton"
    assert data["enemies"][0]["role"] == "Main Antagonist"

    assert data["planets"] == [
        {
            "planet_id": seeded["earth"],
            "name": "Earth",
            "galaxy": "Milky Way",
            "description": None,
            "visit_order": 1,
        }
    ]

    assert len(data["doctors"]) == 1
    doctor = data["doctors"][0]
    assert doctor["incarnation_number"] == 10
    assert doctor["actor"]["name"] == "David Tennant"
    assert [c["name"] for c in doctor["companions"]] == ["Rose Tyler"]


@pytest.mark.asyncio
async def test_episode_without_companion_links(client: AsyncClient, seeded):
    """A Doctor's own first episode does not put them under doctors"""
    response = await client.get(f"/api/queries/join/episode/{seeded['end_of_world']}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["enemies"] == []
    assert data["planets"] == []
    assert data["doctors"] == []


@pytest.mark.asyncio
async def test_episode_details_not_found(client: AsyncClient):
    response = await client.get("/api/queries/join/episode/9999")
    assert response.status_code == 404
    assert response.json()["message"] == "Episode not found"


@pytest.mark.asyncio
async def test_join_rejects_malformed_id(client: AsyncClient):
    response = await client.get("/api/queries/join/episode/zero")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_episode_enemy_nested_species_and_planet(
    client: AsyncClient, db_session: AsyncSession, seeded
):
    db_session.add(
        models.EnemyEpisode(
            enemy_id=seeded["dalek"], episode_id=seeded["parting"], role="Invasion Fleet"
        )
    )
    await db_session.commit()

    response = await client.get(f"/api/queries/join/episode/{seeded['parting']}")
    assert response.status_code == 200
    enemies = response.json()["data"]["enemies"]
    assert len(enemies) == 1
    dalek = enemies[0]
    assert dalek["role"] == "Invasion Fleet"
    assert dalek["species"]["name"] == "Dalek"
    assert dalek["species"]["home_planet_id"] == seeded["skaro"]
    assert dalek["home_planet"]["planet_id"] == seeded["skaro"]
    assert dalek["home_planet"]["name"] == "Skaro"
