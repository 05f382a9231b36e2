import warnings

import pytest
from httpx import AsyncClient

from app.core.errors import ValidationError


@pytest.mark.asyncio
async def test_root_lists_endpoints(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["endpoints"]["doctors"] == "/api/doctors"
    assert "/api/queries/view/doctor-summary" in data["endpoints"]["queries"]["views"]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["data"] == {"database": "connected"}


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    response = await client.get("/api/tardis")
    assert response.status_code == 404
    body = response.json()
    assert body["status"] == "error"
    assert body["message"] == "Cannot GET /api/tardis"
    assert body["path"] == "/api/tardis"


@pytest.mark.asyncio
async def test_malformed_json_body(client: AsyncClient):
    response = await client.post(
        "/api/enemies",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_validation_failure_uses_current_status_names(client: AsyncClient):
    """422 responses do not touch deprecated Starlette status names"""
    with warnings.catch_warnings():
        warnings.filterwarnings("error", message=".*HTTP_422_UNPROCESSABLE_ENTITY.*")
        response = await client.post("/api/enemies", json={})
    assert response.status_code == 422
    assert ValidationError("bad").status_code == 422
