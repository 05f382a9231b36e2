import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models, repository
from app.core.errors import ConflictError, NotFoundError
from app.core.repository import EntityRepository


@pytest.mark.asyncio
async def test_create_many_count_exists(db_session: AsyncSession):
    planets = EntityRepository(db_session, repository.PLANETS)
    assert await planets.exists() is False

    created = await planets.create_many(
        [{"name": "Gallifrey"}, {"name": "Skaro"}, {"name": "Mondas"}]
    )
    assert all(p.planet_id is not None for p in created)
    assert await planets.count() == 3
    assert await planets.exists(models.Planet.name == "Skaro") is True
    assert await planets.exists(models.Planet.name == "Telos") is False


@pytest.mark.asyncio
async def test_get_all_with_criteria(db_session: AsyncSession):
    planets = EntityRepository(db_session, repository.PLANETS)
    await planets.create_many([{"name": "Earth"}, {"name": "New Earth"}])

    rows = await planets.get_all(models.Planet.name.like("%Earth"))
    assert [p.name for p in rows] == ["Earth", "New Earth"]


@pytest.mark.asyncio
async def test_unique_violation_is_conflict(db_session: AsyncSession):
    planets = EntityRepository(db_session, repository.PLANETS)
    await planets.create({"name": "Earth"})

    with pytest.raises(ConflictError):
        await planets.create({"name": "Earth"})

    # Session is usable again after the rollback
    assert await planets.count() == 1


@pytest.mark.asyncio
async def test_update_only_supplied_fields(db_session: AsyncSession):
    planets = EntityRepository(db_session, repository.PLANETS)
    planet = await planets.create({"name": "Skaro", "galaxy": "Unknown"})

    updated = await planets.update(planet.planet_id, {"description": "Dalek homeworld"})
    assert updated.description == "Dalek homeworld"
    assert updated.galaxy == "Unknown"


@pytest.mark.asyncio
async def test_missing_rows_raise_not_found(db_session: AsyncSession):
    enemies = EntityRepository(db_session, repository.ENEMIES)

    with pytest.raises(NotFoundError) as exc_info:
        await enemies.get_by_id(404)
    assert exc_info.value.message == "Enemy not found"

    with pytest.raises(NotFoundError):
        await enemies.update(404, {"name": "Nobody"})

    with pytest.raises(NotFoundError):
        await enemies.delete(404)
